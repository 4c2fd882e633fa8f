"""Optional AI enhancement of finding text.

The collaborator only rewrites a finding's description, exploitation
scenario and recommendation. It never changes severity, identifiers or
location, so it has no effect on scoring or compliance.

Submodules:
    models  -- EnhancementRequest, EnhancementResponse, VulnerabilityEnhancer
    client  -- post_json over httpx.AsyncClient
    groq    -- GroqEnhancer
"""

from chainaudit.enhancement.groq import GroqEnhancer
from chainaudit.enhancement.models import (
    EnhancementRequest,
    EnhancementResponse,
    VulnerabilityEnhancer,
)

__all__ = [
    "EnhancementRequest",
    "EnhancementResponse",
    "GroqEnhancer",
    "VulnerabilityEnhancer",
]
