from importlib import metadata

try:
    __version__ = metadata.version("dscr-calculator")
except metadata.PackageNotFoundError:  # pragma: no cover - during local dev
    from dscr_calc import __version__
