from .core.controller.controller import Controller
from .core.handler.capabilities import FeatureEnumerator, decode_capabilities
from .core.handler.collection import CollectionFetcher, normalize_ndjson
from .core.handler.injection import InjectionOracle

__version__ = "0.1"

__all__ = [
    "Controller",
    "FeatureEnumerator",
    "decode_capabilities",
    "CollectionFetcher",
    "normalize_ndjson",
    "InjectionOracle",
]
