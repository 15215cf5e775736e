from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from .base import CamelModel


class JobAnalysisRequest(CamelModel):
    job_html: str = ""
    job_title: str = ""
    company: str = ""
    location: Optional[str] = None
    job_url: Optional[str] = None
    structured_text: Optional[str] = None
    page_title: Optional[str] = None
    domain: Optional[str] = None
    content_hints: Optional[dict[str, Any]] = None


class CredentialRequest(CamelModel):
    api_key: str = Field(default="", max_length=512)


class ExtensionAuthRequest(CamelModel):
    token: str = ""
