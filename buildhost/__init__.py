"""buildhost - provision a build host for cross-compiling and testing a target."""

try:
    from buildhost._version import version as __version__
except ImportError:
    __version__ = "0.0.0.dev0"
