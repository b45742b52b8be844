"""View rendering pipeline: request dispatch, template lookup and layout composition."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("view-renderer")
except PackageNotFoundError:
    __version__ = "dev"
