import inspect
import textwrap
import shutil
import os
from datetime import datetime
from pathlib import Path

from croncalc.croncalc_env import CroncalcEnvironment
from croncalc.expression import DAY_NAMES

DEFAULT_DATETIME_FORMAT = "%Y.%m.%d %H:%M:%S"


def cron_weekday(dt: datetime) -> int:
    """Day of week with Sunday as 0, the cron convention."""
    return dt.isoweekday() % 7


def format_fire(
    dt: datetime,
    fmt: str = DEFAULT_DATETIME_FORMAT,
    show_weekday: bool = True,
) -> str:
    """
    Format a fire time the way "croncalc next" prints it:

        2024.01.07 00:00:10  Sunday
    """
    text = dt.strftime(fmt)
    if show_weekday:
        text = f"{text}  {DAY_NAMES[cron_weekday(dt)]}"
    return text


def _caller_name(frame) -> str:
    func_name = frame.f_code.co_name

    # Detect instance/class/static context
    if "self" in frame.f_locals:  # instance method
        cls_name = frame.f_locals["self"].__class__.__name__
        return f"{cls_name}.{func_name}"
    if "cls" in frame.f_locals:  # classmethod
        cls_name = frame.f_locals["cls"].__name__
        return f"{cls_name}.{func_name}"
    return func_name


def _write_msg(
    kind: str,
    caller_name: str,
    msg: str,
    file_path: str | Path | None,
    print_output: bool,
):
    # Format the line header
    lines = [
        f"- {datetime.now().strftime('%H:%M:%S')} {kind}_msg ({caller_name}):  ",
    ]
    # Wrap the message text
    lines.extend(
        [
            f"\n{x}"
            for x in textwrap.wrap(
                msg.strip(),
                width=shutil.get_terminal_size()[0] - 6,
                initial_indent="   ",
                subsequent_indent="   ",
            )
        ]
    )
    lines.append("\n\n")

    # Best-effort file logging; fall back to console when the file is unwritable.
    if file_path is None:
        file_path = _default_log_relative_path(kind)
    log_path = _resolve_log_file_path(file_path)

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, "a", encoding="utf-8") as f:
            f.writelines(lines)
    except OSError:
        print_output = True

    if print_output:
        print("".join(lines))


def log_msg(
    msg: str,
    file_path: str | Path | None = None,
    print_output: bool = False,
):
    """
    Log a message and save it directly to a file.

    Args:
        msg (str): The message to log.
        file_path (str | Path | None, optional): Overrides the default path when
            provided. Defaults to ``None`` which writes to ``logs/log_<YYMMDD>.md``.
        print_output (bool, optional): If True, also print to console.
    """
    frame = inspect.stack()[1].frame
    _write_msg("log", _caller_name(frame), msg, file_path, print_output)


def bug_msg(
    msg: str,
    file_path: str | Path | None = None,
    print_output: bool = False,
):
    """
    Companion to log_msg for temporary debugging.

    Writes to ``logs/bug_<YYMMDD>.md`` unless ``file_path`` is given.
    """
    frame = inspect.stack()[1].frame
    _write_msg("bug", _caller_name(frame), msg, file_path, print_output)


def _get_runtime_home() -> Path:
    override = os.environ.get("CRONCALC_HOME")
    if override:
        return Path(override).expanduser()
    return CroncalcEnvironment().home


def _resolve_log_file_path(file_path: str | Path) -> Path:
    path = Path(file_path)
    if path.is_absolute():
        return path
    return _get_runtime_home() / path


def _default_log_relative_path(kind: str) -> Path:
    """Return logs/log_<YYMMDD>.md style paths under the runtime home."""
    suffix = datetime.now().strftime("%y%m%d")
    return Path("logs") / f"{kind}_{suffix}.md"
