from .ledger import LedgerStore
from .profiles import ProfileRegistry
from .records import LedgerEntry, Profile, ProfileTotal
from .settings import SettingsStore
from .users import UserStore

__all__ = [
    "LedgerEntry",
    "LedgerStore",
    "Profile",
    "ProfileRegistry",
    "ProfileTotal",
    "SettingsStore",
    "UserStore",
]
