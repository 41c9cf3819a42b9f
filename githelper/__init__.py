"""githelper: shortcuts for git and GitHub workflows that plain git makes awkward."""

__version__ = "0.3.0"
