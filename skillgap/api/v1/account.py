from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException, status

from skillgap.core.config import settings
from skillgap.core.security import current_user_id, encrypt_credential, issue_token, verify_token
from skillgap.schemas.api import CredentialRequest, ExtensionAuthRequest
from skillgap.services.errors import ValidationError
from skillgap.storage import store

router = APIRouter()


@router.get("/auth/me")
async def me(user_id: str = Depends(current_user_id)):
    user = await asyncio.to_thread(store.get_user, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"id": user.id, "email": user.email, "name": user.name, "hasGeminiKey": user.has_credential}


@router.post("/api-key/gemini")
async def save_gemini_key(payload: CredentialRequest, user_id: str = Depends(current_user_id)):
    api_key = payload.api_key.strip()
    if not api_key:
        raise ValidationError("API key is required")
    updated = await asyncio.to_thread(store.update_user_credential, user_id, encrypt_credential(api_key))
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"message": "Gemini API key updated successfully"}


@router.post("/auth/extension-token")
async def extension_token(user_id: str = Depends(current_user_id)):
    days = settings.extension_token_ttl_days
    return {
        "message": "Extension token generated successfully",
        "token": issue_token(user_id, kind="extension"),
        "expiresIn": f"{days} days",
    }


@router.post("/extension/auth")
async def extension_auth(payload: ExtensionAuthRequest):
    if not payload.token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")
    user_id = verify_token(payload.token.strip())
    user = await asyncio.to_thread(store.get_user, user_id) if user_id else None
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    resume = await asyncio.to_thread(store.get_resume, user.id)
    has_skills = resume is not None and resume.has_skills
    return {
        "user": {"id": user.id, "name": user.name, "email": user.email},
        "hasResume": resume is not None,
        "hasGeminiKey": user.has_credential,
        "hasSkills": has_skills,
        "skillCount": len(resume.extracted_skills) if resume is not None and has_skills else 0,
    }
