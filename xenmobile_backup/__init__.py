"""XenMobile configuration backup to a static HTML report."""

__version__ = "1.0.0"
