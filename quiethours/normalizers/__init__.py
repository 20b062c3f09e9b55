# Import all topic normalizers to trigger registration with the registry.
from quiethours.normalizers import quiet_hours  # noqa: F401
from quiethours.normalizers import parking  # noqa: F401
from quiethours.normalizers import bulk_trash  # noqa: F401
from quiethours.normalizers import fireworks  # noqa: F401
