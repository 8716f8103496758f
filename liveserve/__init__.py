from liveserve.api import ClientRegistry, LiveConnection, LiveServer, Notifier
from liveserve.api.errors import (
    DeliveryError,
    LiveServeError,
    UpgradeError,
    WatchError,
    WatchInitError,
    WatchObserveError,
    WatchRegisterError,
)
from liveserve.api.utils import ChangeEvent, ChangeKind, ChangeWatcher

__version__ = "0.1.0"
