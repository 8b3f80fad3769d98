from .account_lifecycle import AccountInfo, AccountLifecycle, LifecycleOptions
from .lockout_policy import LockoutPolicy

__all__ = ["AccountInfo", "AccountLifecycle", "LifecycleOptions", "LockoutPolicy"]
