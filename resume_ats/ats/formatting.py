"""Plain-text and Markdown renderings of portfolios and optimized resumes."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from resume_ats.schemas.optimized import OptimizedResume, parse_resume_date
from resume_ats.schemas.portfolio import Portfolio, PortfolioSkill


def _iso_date(value: date | None, is_current: bool = False) -> str:
    if is_current:
        return "Present"
    if value is None:
        return ""
    return value.isoformat()


def _month_year(value: date | None, is_current: bool = False) -> str:
    if is_current:
        return "Present"
    if value is None:
        return ""
    return value.strftime("%b %Y")


def _group_skills(skills: Iterable[PortfolioSkill]) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for skill in skills:
        grouped.setdefault(skill.category or "Other", []).append(skill.name)
    return grouped


def portfolio_to_resume_text(portfolio: Portfolio) -> str:
    """Flat text block fed to resume extraction."""
    lines = [
        f"Name: {portfolio.name or 'N/A'}",
        f"Email: {portfolio.email or ''}",
        f"Phone: {portfolio.phone or ''}",
        f"LinkedIn: {portfolio.linkedin or ''}",
        f"Portfolio: {portfolio.website or portfolio.github or ''}",
        "",
    ]

    if portfolio.work_experiences:
        lines.append("WORK EXPERIENCE")
        for exp in portfolio.work_experiences:
            lines.append(f"{exp.job_title} at {exp.company}")
            lines.append(f"Location: {exp.location or 'N/A'}")
            lines.append(f"Duration: {_iso_date(exp.start_date)} - {_iso_date(exp.end_date, exp.is_current)}")
            lines.extend(f"- {bullet}" for bullet in exp.bullet_points)
            lines.append("")

    if portfolio.educations:
        lines.append("EDUCATION")
        for edu in portfolio.educations:
            lines.append(f"{edu.degree} in {edu.field_of_study}")
            lines.append(f"Institution: {edu.institution}")
            lines.append(f"Duration: {_iso_date(edu.start_date)} - {_iso_date(edu.end_date)}")
            if edu.gpa:
                lines.append(f"GPA: {edu.gpa}")
            lines.append("")

    if portfolio.projects:
        lines.append("PROJECTS")
        for proj in portfolio.projects:
            lines.append(proj.name)
            if proj.description:
                lines.append(proj.description)
            if proj.technologies:
                lines.append(f"Technologies: {', '.join(proj.technologies)}")
            if proj.url:
                lines.append(f"Link: {proj.url}")
            lines.extend(f"- {bullet}" for bullet in proj.bullet_points)
            lines.append("")

    if portfolio.skills:
        lines.append("SKILLS")
        for category, names in _group_skills(portfolio.skills).items():
            lines.append(f"{category}: {', '.join(names)}")
        lines.append("")

    if portfolio.achievements:
        lines.append("ACHIEVEMENTS")
        for ach in portfolio.achievements:
            lines.append(f"{ach.title}: {ach.description}")

    return "\n".join(lines).rstrip() + "\n"


def _contact_line(
    email: str | None,
    phone: str | None,
    linkedin: str | None,
    github: str | None,
    website: str | None,
) -> str:
    parts = [part for part in (email, phone) if part]
    if linkedin:
        parts.append(f"LinkedIn: {linkedin}")
    if github:
        parts.append(f"GitHub: {github}")
    if website:
        parts.append(f"Website: {website}")
    return " | ".join(parts)


def portfolio_to_markdown(portfolio: Portfolio) -> str:
    """Markdown resume used as the optimizer's source text."""
    out: list[str] = []
    if portfolio.name:
        out.append(f"# {portfolio.name}\n")

    contact = _contact_line(portfolio.email, portfolio.phone, portfolio.linkedin, portfolio.github, portfolio.website)
    if contact:
        out.append(f"{contact}\n")

    if portfolio.work_experiences:
        out.append("## Work Experience\n")
        for exp in portfolio.work_experiences:
            out.append(f"### {exp.job_title} at {exp.company}")
            out.append(
                f"{exp.location or ''} | {_month_year(exp.start_date)} - {_month_year(exp.end_date, exp.is_current)}\n"
            )
            out.extend(f"- {bullet}" for bullet in exp.bullet_points)
            out.append("")

    if portfolio.educations:
        out.append("## Education\n")
        for edu in portfolio.educations:
            out.append(f"### {edu.degree} in {edu.field_of_study}")
            out.append(f"{edu.institution} | {_month_year(edu.start_date)} - {_month_year(edu.end_date)}")
            if edu.gpa:
                out.append(f"GPA: {edu.gpa}")
            out.append("")

    if portfolio.skills:
        out.append("## Skills\n")
        for category, names in _group_skills(portfolio.skills).items():
            out.append(f"**{category}**: {', '.join(names)}\n")

    if portfolio.projects:
        out.append("## Projects\n")
        for proj in portfolio.projects:
            out.append(f"### {proj.name}")
            if proj.description:
                out.append(f"{proj.description}\n")
            if proj.technologies:
                out.append(f"**Technologies**: {', '.join(proj.technologies)}\n")
            if proj.url:
                out.append(f"**Link**: {proj.url}\n")
            out.extend(f"- {bullet}" for bullet in proj.bullet_points)
            out.append("")

    if portfolio.achievements:
        out.append("## Achievements\n")
        for ach in portfolio.achievements:
            out.append(f"### {ach.title} ({ach.category})")
            if ach.date:
                out.append(f"{_month_year(ach.date)}\n")
            out.append(f"{ach.description}\n")

    return "\n".join(out).rstrip() + "\n"


def portfolio_for_matching(portfolio: Portfolio) -> str:
    """Markdown listing with ``[ID: ...]`` tags so the model can answer with ids."""
    out = ["# Work Experience\n"]
    for exp in portfolio.work_experiences:
        out.append(f"## [ID: {exp.id}] {exp.job_title} at {exp.company}")
        out.append(f"Location: {exp.location or 'N/A'}")
        out.append(f"Duration: {_month_year(exp.start_date)} - {_month_year(exp.end_date, exp.is_current or exp.end_date is None)}")
        out.append("Achievements:")
        out.extend(f"- {bullet}" for bullet in exp.bullet_points)
        out.append("")

    out.append("\n# Education\n")
    for edu in portfolio.educations:
        out.append(f"## [ID: {edu.id}] {edu.degree} in {edu.field_of_study}")
        out.append(f"Institution: {edu.institution}")
        out.append(f"Duration: {_month_year(edu.start_date)} - {_month_year(edu.end_date, edu.end_date is None)}")
        if edu.gpa:
            out.append(f"GPA: {edu.gpa}")
        out.append("")

    out.append("\n# Projects\n")
    for proj in portfolio.projects:
        out.append(f"## [ID: {proj.id}] {proj.name}")
        if proj.bullet_points:
            out.append("Highlights:")
            out.extend(f"- {bullet}" for bullet in proj.bullet_points)
        out.append(f"Technologies: {', '.join(proj.technologies)}")
        if proj.url:
            out.append(f"URL: {proj.url}")
        out.append("")

    out.append("\n# Achievements\n")
    for ach in portfolio.achievements:
        out.append(f"## [ID: {ach.id}] {ach.title} ({ach.category})")
        out.append(f"Description: {ach.description}")
        if ach.date:
            out.append(f"Date: {_month_year(ach.date)}")
        out.append("")

    out.append("\n# Skills\n")
    grouped: dict[str, list[PortfolioSkill]] = {}
    for skill in portfolio.skills:
        grouped.setdefault(skill.category or "Other", []).append(skill)
    for category, skills in grouped.items():
        out.append(f"## {category}")
        out.extend(f"- [ID: {skill.id}] {skill.name}" for skill in skills)
        out.append("")

    return "\n".join(out)


def optimized_resume_to_markdown(resume: OptimizedResume) -> str:
    out: list[str] = []
    contact = resume.contact_info
    if contact.name:
        out.append(f"# {contact.name}\n")
    line = _contact_line(contact.email, contact.phone, contact.linkedin, contact.github, contact.website)
    if line:
        out.append(f"{line}\n")

    if resume.professional_summary:
        out.append(f"## Professional Summary\n\n{resume.professional_summary}\n")

    if resume.work_experiences:
        out.append("## Work Experience\n")
        for exp in resume.work_experiences:
            out.append(f"### {exp.job_title} at {exp.company}")
            start = _month_year(parse_resume_date(exp.start_date))
            end = _month_year(parse_resume_date(exp.end_date), exp.is_current)
            out.append(f"{exp.location or ''} | {start} - {end}\n")
            out.extend(f"- {bullet}" for bullet in exp.bullet_points)
            out.append("")

    if resume.educations:
        out.append("## Education\n")
        for edu in resume.educations:
            out.append(f"### {edu.degree} in {edu.field_of_study}")
            start = _month_year(parse_resume_date(edu.start_date))
            end = _month_year(parse_resume_date(edu.end_date), edu.is_current)
            out.append(f"{edu.institution} | {start} - {end}")
            if edu.gpa:
                out.append(f"GPA: {edu.gpa}")
            out.append("")

    if resume.skills:
        out.append("## Skills\n")
        grouped: dict[str, list[str]] = {}
        for skill in resume.skills:
            grouped.setdefault(skill.category or "Other", []).append(skill.name)
        for category, names in grouped.items():
            out.append(f"**{category}**: {', '.join(names)}\n")

    if resume.projects:
        out.append("## Projects\n")
        for proj in resume.projects:
            out.append(f"### {proj.name}")
            if proj.description:
                out.append(f"{proj.description}\n")
            if proj.technologies:
                out.append(f"**Technologies**: {', '.join(proj.technologies)}\n")
            if proj.url:
                out.append(f"**Link**: {proj.url}\n")
            out.extend(f"- {bullet}" for bullet in proj.bullet_points)
            out.append("")

    if resume.achievements:
        out.append("## Achievements\n")
        for ach in resume.achievements:
            out.append(f"### {ach.title} ({ach.category})")
            achieved = parse_resume_date(ach.date)
            if achieved:
                out.append(f"{_month_year(achieved)}\n")
            out.append(f"{ach.description}\n")

    return "\n".join(out).rstrip() + "\n"
