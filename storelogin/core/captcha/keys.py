"""Arkose Labs public site keys used by the storefront."""
from enum import Enum


class ArkosePublicKey(str, Enum):
    """Public keys identifying which challenge the storefront expects."""
    LOGIN = '37D033EB-6489-3763-2AE1-A228C04103F5'
    CREATE = 'E8AD0E2A-2E72-4F7E-A9F2-BDA5AC2EDCD2'
