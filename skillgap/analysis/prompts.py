from __future__ import annotations

import json
import re
from typing import Any

from skillgap.ai.types import ChatMessage

_NON_ASCII_RE = re.compile(r"[^\x00-\x7F]")


def scrub_ascii(text: str) -> str:
    return _NON_ASCII_RE.sub(" ", text or "")


def skill_extraction_messages(resume_text: str) -> list[ChatMessage]:
    return [
        ChatMessage(
            role="user",
            content=(
                "Analyze this resume and extract ALL skills mentioned, including:\n"
                "- Technical skills (programming languages, frameworks, tools, databases)\n"
                "- Software and platforms\n"
                "- Methodologies and processes\n"
                "- Soft skills and competencies\n"
                "- Certifications and qualifications\n\n"
                f"RESUME TEXT:\n{resume_text}\n\n"
                "Return ONLY a JSON array of skill names as strings. Be comprehensive but avoid duplicates.\n"
                'Example: ["JavaScript", "React", "Node.js", "Problem Solving", "Team Leadership"]'
            ),
        )
    ]


def resume_profile_messages(resume_text: str) -> list[ChatMessage]:
    return [
        ChatMessage(
            role="system",
            content=(
                "You are a career analyst. Read resumes carefully, never invent facts, "
                "and use empty strings or empty lists when the resume is silent. Return JSON only."
            ),
        ),
        ChatMessage(
            role="user",
            content=(
                "Analyze this resume comprehensively for career matching and job recommendations.\n\n"
                f"RESUME TEXT:\n{resume_text}\n\n"
                "Cover:\n"
                "1. personalInfo: contact details, portfolio and social links.\n"
                "2. careerLevel: years of experience, level (fresher, junior, mid-level, senior, lead, executive), "
                "isFresher, career progression.\n"
                "3. skills: categorize every skill into technical, programming, frameworks, tools, databases, "
                "cloud, soft, languages, certifications.\n"
                "4. projectAnalysis: project count, quality (excellent, good, average, basic, poor), "
                "complexity (basic, intermediate, advanced, expert), team and open-source work.\n"
                "5. education: degree, field, university, gpa, graduation year, additional courses.\n"
                "6. careerFit: suitable roles ordered best first, primary and secondary domains, "
                "readiness (job-ready, needs-improvement, requires-training), strengths, improvement areas.\n"
                "7. workPreferences: location, remote openness, relocation, internships, full-time readiness.\n"
                "8. salaryInsights: a market-based range, currency and the factors considered."
            ),
        ),
    ]


def skill_gap_messages(job_text: str, resume_skills: list[str], weights: dict[str, Any]) -> list[ChatMessage]:
    required = int(round(float(weights.get("required", 0.60)) * 100))
    preferred = int(round(float(weights.get("preferred", 0.25)) * 100))
    profile_fit = int(round(float(weights.get("profile_fit", 0.15)) * 100))
    return [
        ChatMessage(
            role="system",
            content="You are an expert technical recruiter. Return strict JSON only.",
        ),
        ChatMessage(
            role="user",
            content=(
                "Analyze this job posting and compare it with the candidate's skills.\n\n"
                f"JOB POSTING HTML:\n{job_text}\n\n"
                f"CANDIDATE'S SKILLS:\n{json.dumps(resume_skills)}\n\n"
                "Return JSON keys exactly: jobRequiredSkills, jobPreferredSkills, matchedSkills, missingSkills, "
                "partialSkills, matchPercentage (0-100), experienceLevel (junior|mid-level|senior), "
                "recommendations {strengths, improvements, interviewTips, applicationAdvice}, "
                "skillsByCategory {technical, soft, tools} each with {matched, missing, partial}, "
                "jobInsights {companyType, workType, seniorityLevel, urgency (high|medium|low), "
                "competitiveFactors, redFlags, opportunities}.\n\n"
                "Calculate matchPercentage from:\n"
                f"- Required skills match ({required}% weight)\n"
                f"- Preferred skills match ({preferred}% weight)\n"
                f"- Overall profile fit ({profile_fit}% weight)\n\n"
                "Be honest about gaps but also highlight transferable skills and potential."
            ),
        ),
    ]


def job_analysis_messages(job_text: str, profile_json: str) -> list[ChatMessage]:
    return [
        ChatMessage(
            role="system",
            content=(
                "You are an expert career consultant and technical recruiter. Be honest and practical. "
                "Scores are numbers from 0 to 100. Return JSON only."
            ),
        ),
        ChatMessage(
            role="user",
            content=(
                "Analyze this job posting and assess the match against the candidate's resume profile.\n\n"
                f"JOB POSTING HTML:\n{job_text}\n\n"
                f"CANDIDATE RESUME PROFILE:\n{profile_json}\n\n"
                "Cover:\n"
                "1. jobDetails: title, company, location, department, industry, size and type.\n"
                "2. requirements: experience, education, skills split into mandatory, preferred, niceToHave, "
                "certifications.\n"
                "3. jobCharacteristics: workType (remote, hybrid, onsite), employment type, schedule, travel, "
                "team size, reporting structure.\n"
                "4. compensation: salary range, currency, whether the role is paid, benefits and bonuses.\n"
                "5. matchAnalysis: overallMatch, skillMatch, experienceMatch, locationMatch, compensationMatch, "
                "cultureMatch, plus matched, missing and overqualified areas. Use null for a score you cannot judge.\n"
                "6. recommendation: shouldApply, confidence, applicationPriority (high, medium, low), reasons, "
                "concerns, preparation tips, interview focus.\n"
                "7. careerGrowth and riskAssessment: growth potential, learning, risk level, red flags, mitigation.\n\n"
                "If the page is not a job posting, say so through low scores and the risk assessment."
            ),
        ),
    ]


def report_messages(
    profile_summary: str,
    job_summary: str,
    *,
    max_items: int,
    max_strengths: int,
    max_concerns: int,
) -> list[ChatMessage]:
    return [
        ChatMessage(
            role="system",
            content="You are a senior career strategist. Keep output concise and actionable. Return JSON only.",
        ),
        ChatMessage(
            role="user",
            content=(
                "Synthesize the resume analysis and job matching data into a job application report.\n\n"
                f"RESUME PROFILE (Summary):\n{profile_summary}\n\n"
                f"JOB ANALYSIS (Summary):\n{job_summary}\n\n"
                "1. executiveSummary: recommendation APPLY, CONSIDER or SKIP; matchScore 0-100; "
                f"at most {max_strengths} keyStrengths; at most {max_concerns} majorConcerns; oneLineAdvice.\n"
                "2. detailedAnalysis: fit, career impact, compensation, skill gaps, interview preparation "
                "(under 200 words each).\n"
                f"3. actionItems: beforeApplying, applicationTips, interviewPrep, skillsToImprove "
                f"(max {max_items} items each).\n"
                f"4. alternativeOptions: similarRoles, betterFitCompanies, skillBuildingPath (max {max_items} each).\n"
                f"5. timeline: immediateActions, shortTerm, longTerm (max {max_items} each)."
            ),
        ),
    ]
