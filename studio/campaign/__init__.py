"""
Campaign Generation

  Credential Gate → Plan Generation (Gemini Flash) → Preview Rendering (Gemini Pro Image)
  Orchestrator — campaign status, shot list and per-shot retakes
"""

from .orchestrator import CampaignOrchestrator
from .credentials import CredentialGate, EnvCredentialProvider
from .models import CampaignStatus, CampaignRequest, Shot
from .errors import ErrorKind, classify

__all__ = [
    "CampaignOrchestrator",
    "CredentialGate",
    "EnvCredentialProvider",
    "CampaignStatus",
    "CampaignRequest",
    "Shot",
    "ErrorKind",
    "classify",
]
