"""Proficiency Without Level DC adjuster."""
from pwl_dc_adjuster.config import MODULE_ID, MODULE_VERSION

__version__ = MODULE_VERSION

__all__ = ["MODULE_ID", "MODULE_VERSION", "__version__"]
