from __future__ import annotations

EXTRACTION_SYSTEM_PROMPT = (
    "You are a JSON extraction engine. You answer with exactly one JSON object "
    "and nothing else: no Markdown, no code fences, no commentary."
)

EMPLOYMENT_TYPES = (
    "Full-time",
    "Full time",
    "Part-time",
    "Part time",
    "Contract",
    "Internship",
    "Temporary",
    "Not Specified",
)

_JOB_SCHEMA = """{
  "jobId": "string",
  "jobTitle": "string",
  "companyProfile": {
    "companyName": "string",
    "industry": "Optional[string]",
    "website": "Optional[string]",
    "description": "Optional[string]"
  },
  "location": {
    "city": "string",
    "state": "string",
    "country": "string",
    "remoteStatus": "Not Specified"
  },
  "datePosted": "YYYY-MM-DD",
  "employmentType": "%(employment_types)s",
  "jobSummary": "string",
  "keyResponsibilities": ["string", "..."],
  "qualifications": {
    "required": ["string", "..."],
    "preferred": ["string", "..."]
  },
  "compensationAndBenefits": {
    "salaryRange": "string",
    "benefits": ["string", "..."]
  },
  "applicationInfo": {
    "howToApply": "string",
    "applyLink": "string",
    "contactEmail": "Optional[string]"
  },
  "extractedKeywords": ["string", "..."]
}""" % {"employment_types": " | ".join(EMPLOYMENT_TYPES)}

_RESUME_SCHEMA = """{
  "UUID": "string",
  "Personal Data": {
    "firstName": "string",
    "lastName": "string",
    "email": "string",
    "phone": "string",
    "linkedin": "string",
    "portfolio": "string",
    "location": {"city": "string", "country": "string"}
  },
  "Experiences": [
    {
      "jobTitle": "string",
      "company": "string",
      "location": "string",
      "startDate": "YYYY-MM-DD",
      "endDate": "YYYY-MM-DD or Present",
      "description": ["string", "..."],
      "technologiesUsed": ["string", "..."]
    }
  ],
  "Projects": [
    {
      "projectName": "string",
      "description": "string",
      "technologiesUsed": ["string", "..."],
      "link": "string",
      "startDate": "YYYY-MM-DD",
      "endDate": "YYYY-MM-DD"
    }
  ],
  "Skills": [{"category": "string", "skillName": "string"}],
  "Research Work": [
    {
      "title": "string | null",
      "publication": "string | null",
      "date": "YYYY-MM-DD | null",
      "link": "string | null",
      "description": "string | null"
    }
  ],
  "Achievements": ["string", "..."],
  "Education": [
    {
      "institution": "string",
      "degree": "string",
      "fieldOfStudy": "string | null",
      "startDate": "YYYY-MM-DD",
      "endDate": "YYYY-MM-DD",
      "grade": "string",
      "description": "string"
    }
  ],
  "Extracted Keywords": ["string", "..."]
}"""


def job_extraction_prompt(posting: str) -> str:
    return f"""Convert the raw job posting below into exactly this JSON schema.

Rules:
- Do not add fields, remove fields or rename keys.
- Use "YYYY-MM-DD" for every date.
- employmentType must be one of: {", ".join(EMPLOYMENT_TYPES)}.
- URLs (website, applyLink) must be valid URIs.
- If the posting does not state a value, use an empty string or an empty list. Never invent one.
- extractedKeywords lists the skills, tools, technologies and domain terms the posting emphasises.
- Output raw JSON only.

Schema:

{_JOB_SCHEMA}

Job Posting:

{posting}"""


def resume_extraction_prompt(resume_text: str) -> str:
    return f"""Convert the resume text below into exactly this JSON schema.

Rules:
- Map each resume section onto the schema without inventing information.
- If a field is missing in the source, use an empty string or an empty list.
- Keep bullet points as short factual sentences in the description arrays.
- Use "YYYY-MM-DD" where dates are available and "Present" for an ongoing end date.
- List technical skills, languages, certifications and awards exactly as they appear.
- "Extracted Keywords" lists the skills, tools, technologies and domain terms the resume demonstrates.
- Output raw JSON only.

Schema:

{_RESUME_SCHEMA}

Resume:

{resume_text}"""


OPTIMIZER_SYSTEM_PROMPT = (
    "You are an expert resume editor and talent acquisition specialist. "
    "You only reorganise, reword and re-emphasise facts that already exist in the candidate's resume."
)

_OPTIMIZER_RULES = """- Read the job description and the extracted job keywords carefully.
- Close the gaps listed in the ATS guidance before rewriting individual bullets:
  - ATS Recommendations:
{recommendations}
  - Priority keywords ranked by job emphasis:
{skill_priority}
- Rewrite by rephrasing and reordering existing content so the most relevant evidence comes first:
  - Weave job-aligned keywords naturally into existing bullets, sentences and headings. Bullets may be merged, split or reordered, and tools or methods already mentioned may be surfaced.
  - Never introduce employers, job titles, projects, technologies, certifications, dates or accomplishments that are not in the original resume.
  - {structure_rule}
  - When a requirement is missing, do not fabricate experience. Frame adjacent, transferable evidence from the resume in the job's terminology instead.
  - Keep a natural, professional tone. No keyword stuffing.
  - Prefer quantifiable results that are already in the resume, led by action verbs.
  - The current cosine similarity score is {cosine:.4f}. Revise the resume within these constraints to raise it."""

_OPTIMIZER_CONTEXT = """Job Description:
```md
{job_description}
```

Extracted Job Keywords:
```md
{job_keywords}
```

Original Resume:
```md
{resume_markdown}
```

Extracted Resume Keywords:
```md
{resume_keywords}
```"""


def resume_improvement_prompt(
    *,
    recommendations: str,
    skill_priority: str,
    cosine_similarity: float,
    job_description: str,
    job_keywords: str,
    resume_markdown: str,
    resume_keywords: str,
) -> str:
    rules = _OPTIMIZER_RULES.format(
        recommendations=recommendations,
        skill_priority=skill_priority,
        structure_rule=(
            "Preserve the section structure (Education, Work Experience, Projects, Skills, Achievements). "
            "A short Professional Summary may be added at the top; no other new sections."
        ),
        cosine=cosine_similarity,
    )
    context = _OPTIMIZER_CONTEXT.format(
        job_description=job_description,
        job_keywords=job_keywords,
        resume_markdown=resume_markdown,
        resume_keywords=resume_keywords,
    )
    return (
        "Revise the resume below so it aligns as closely as possible with the job description "
        "and its extracted keywords.\n\n"
        f"Instructions:\n{rules}\n"
        "- Output ONLY the improved resume in Markdown, without explanations or commentary.\n\n"
        f"{context}\n\n"
        "NOTE: ONLY OUTPUT THE IMPROVED RESUME IN MARKDOWN FORMAT."
    )


_OPTIMIZED_RESUME_SCHEMA = """{
  "contactInfo": {"name": "string", "email": "string | null", "phone": "string | null",
                  "linkedin": "URL | null", "github": "URL | null", "website": "URL | null"},
  "professionalSummary": "2-3 sentences | null",
  "workExperiences": [{"jobTitle": "string", "company": "string", "location": "string | null",
                       "startDate": "YYYY-MM-DD", "endDate": "YYYY-MM-DD | Present | null",
                       "isCurrent": true, "bulletPoints": ["string"]}],
  "educations": [{"institution": "string", "degree": "string", "fieldOfStudy": "string",
                  "gpa": "string | null", "startDate": "YYYY-MM-DD",
                  "endDate": "YYYY-MM-DD | Present | null", "isCurrent": false}],
  "skills": [{"name": "string", "category": "string | null"}],
  "projects": [{"name": "string", "description": "string | null", "bulletPoints": ["string"],
                "technologies": ["string"], "url": "URL | null"}],
  "achievements": [{"title": "string", "description": "string", "category": "string",
                    "date": "YYYY-MM-DD | null"}]
}"""


def structured_resume_improvement_prompt(
    *,
    recommendations: str,
    skill_priority: str,
    cosine_similarity: float,
    job_description: str,
    job_keywords: str,
    resume_markdown: str,
    resume_keywords: str,
) -> str:
    rules = _OPTIMIZER_RULES.format(
        recommendations=recommendations,
        skill_priority=skill_priority,
        structure_rule=(
            "Preserve the core structure: Contact Info, Professional Summary (optional), Education, "
            "Work Experience, Projects (optional), Skills, Achievements (optional)."
        ),
        cosine=cosine_similarity,
    )
    context = _OPTIMIZER_CONTEXT.format(
        job_description=job_description,
        job_keywords=job_keywords,
        resume_markdown=resume_markdown,
        resume_keywords=resume_keywords,
    )
    return (
        "Revise the resume below so it aligns as closely as possible with the job description "
        "and its extracted keywords.\n\n"
        f"Instructions:\n{rules}\n"
        '- Use "YYYY-MM-DD" for all dates and "Present" for current positions or ongoing education.\n\n'
        f"{context}\n\n"
        "Return the optimized resume as one JSON object matching this schema exactly:\n\n"
        f"{_OPTIMIZED_RESUME_SCHEMA}"
    )


JOB_MATCHING_SYSTEM_PROMPT = """You are an expert career advisor. Given a job description and a candidate's portfolio, select the portfolio items that make the candidate most competitive for this position.

Weigh required and preferred qualifications, the technical stack and tools, seniority, domain terminology and recency. Prefer items with quantifiable results. Three highly relevant experiences beat five mediocre ones; select what fits on a one to two page resume.

Also propose a professional resume title of three to eight words that names the core role and specialisation (for example "Senior Software Engineer - Cloud Infrastructure").

Answer with one JSON object:
{"workExperienceIds": [], "educationIds": [], "projectIds": [], "achievementIds": [], "skillIds": [], "resumeTitle": "string", "reasoning": "string"}
Only use IDs that appear in the portfolio."""


def job_matching_user_prompt(job_description: str, portfolio_text: str) -> str:
    return f"""Select the most relevant items from the candidate's portfolio for this job.

## Job Description:
{job_description}

## Candidate Portfolio:
{portfolio_text}
"""
