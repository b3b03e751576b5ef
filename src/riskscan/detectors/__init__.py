"""Risk detectors run over a parsed contract.

Provides:
- Detector protocol and finding-construction helpers
- MintingDetector for supply inflation risks
- FundControlDetector for withdrawal and balance risks
- OwnershipDetector for centralization risks
- UpgradeDetector for proxy and delegatecall risks
- DangerousFunctionsDetector for selfdestruct, tx.origin and unchecked calls
- EconomicDetector for fee, list and transaction-limit levers
- default_detectors: Fresh instances of all six detectors
"""

from .base import Detector, create_finding
from .minting import MintingDetector
from .fund_control import FundControlDetector
from .ownership import OwnershipDetector
from .upgrade import UpgradeDetector
from .dangerous import DangerousFunctionsDetector
from .economic import EconomicDetector


def default_detectors() -> list[Detector]:
    """Return one instance of every built-in detector."""
    return [
        MintingDetector(),
        FundControlDetector(),
        OwnershipDetector(),
        UpgradeDetector(),
        DangerousFunctionsDetector(),
        EconomicDetector(),
    ]


__all__ = [
    "Detector",
    "create_finding",
    "MintingDetector",
    "FundControlDetector",
    "OwnershipDetector",
    "UpgradeDetector",
    "DangerousFunctionsDetector",
    "EconomicDetector",
    "default_detectors",
]
