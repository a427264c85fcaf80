from pathlib import Path
import os
import tomllib
from pydantic import BaseModel, Field, ValidationError
from typing import Optional
from jinja2 import Template


# ─── Config Schema ─────────────────────────────────────────────────
class OutputConfig(BaseModel):
    datetime_format: str = "%Y.%m.%d %H:%M:%S"
    show_weekday: bool = True


class SearchConfig(BaseModel):
    count: int = Field(9, ge=1)
    expression: str = "10 0-8/2 * * SUN,TUE"


class CroncalcConfig(BaseModel):
    title: str = "Croncalc Configuration"
    output: OutputConfig = OutputConfig()
    search: SearchConfig = SearchConfig()


# ─── Commented Template ────────────────────────────────────
CONFIG_TEMPLATE = """\
title = "{{ title }}"

[output]
# datetime_format: str = any strftime format
# used for each fire time printed by "croncalc next"
datetime_format = "{{ output.datetime_format }}"

# show_weekday: bool = true | false
# append the weekday name after each fire time
show_weekday = {{ output.show_weekday | lower }}

[search]
# count: int >= 1
# how many fire times "croncalc next" prints when -n is not given
count = {{ search.count }}

# expression: str
# the cron expression "croncalc next" uses when none is given.
# Five fields (minute hour day-of-month month day-of-week) or six
# with a leading seconds field.
expression = "{{ search.expression }}"
"""

# ─── Save Config with Comments ───────────────────────────────


def render_config(config: CroncalcConfig) -> str:
    template = Template(CONFIG_TEMPLATE)
    return template.render(**config.model_dump()).strip() + "\n"


def save_config_from_template(config: CroncalcConfig, path: Path):
    path.write_text(render_config(config), encoding="utf-8")
    print(f"✅ Config with comments written to: {path}")


# ─── Main Environment Class ───────────────────────────────


class CroncalcEnvironment:
    def __init__(self):
        self._home = self._resolve_home()
        self._config: Optional[CroncalcConfig] = None

    @property
    def home(self) -> Path:
        return self._home

    @property
    def config_path(self) -> Path:
        return self.home / "config.toml"

    def ensure(self, init_config: bool = True):
        self.home.mkdir(parents=True, exist_ok=True)

        if init_config and not self.config_path.exists():
            save_config_from_template(CroncalcConfig(), self.config_path)

    def load_config(self) -> CroncalcConfig:
        # Step 1: Create the file if it doesn't exist
        if not self.config_path.exists():
            config = CroncalcConfig()
            self.home.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(render_config(config), encoding="utf-8")
            print(f"✅ Created new config file at {self.config_path}")
            self._config = config
            return config

        # Step 2: Try to load and validate the config
        try:
            with open(self.config_path, "rb") as f:
                data = tomllib.load(f)
            config = CroncalcConfig.model_validate(data)
        except (ValidationError, tomllib.TOMLDecodeError) as e:
            print(f"⚠️ Config error in {self.config_path}: {e}\nUsing defaults.")
            config = CroncalcConfig()

        # Step 3: Always regenerate the canonical version
        rendered = render_config(config)
        current_text = self.config_path.read_text(encoding="utf-8")

        if rendered != current_text:
            self.config_path.write_text(rendered, encoding="utf-8")
            print(f"✅ Updated {self.config_path} with any missing defaults.")

        self._config = config
        return config

    @property
    def config(self) -> CroncalcConfig:
        if self._config is None:
            return self.load_config()
        return self._config

    def _resolve_home(self) -> Path:
        env_home = os.getenv("CRONCALC_HOME")
        if env_home:
            return Path(env_home).expanduser()

        xdg_home = os.getenv("XDG_CONFIG_HOME")
        if xdg_home:
            return Path(xdg_home).expanduser() / "croncalc"
        else:
            return Path.home() / ".config" / "croncalc"
