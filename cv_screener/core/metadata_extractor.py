"""
Keyword inventories reported alongside the score. Not used for scoring.
"""

from typing import List, Sequence

from cv_screener.core.schemas import CandidateMetadata


TECHNOLOGY_KEYWORDS = (
    "javascript", "python", "java", "react", "angular", "vue", "node.js", "express",
    "mongodb", "mysql", "postgresql", "docker", "kubernetes", "aws", "azure", "git",
    "typescript", "html", "css", "sass", "webpack", "npm", "yarn", "redux", "graphql",
    "rest api", "microservices", "agile", "scrum", "devops", "ci/cd", "jenkins",
    "php", "laravel", "symfony", "django", "flask", "spring", "hibernate", "maven",
    "gradle", "junit", "selenium", "cypress", "jest", "mocha", "linux", "nginx",
    "apache", "redis", "elasticsearch", "kafka", "rabbitmq", "terraform", "ansible",
)

SOFT_SKILL_KEYWORDS = (
    "leadership", "communication", "teamwork", "problem solving", "analytical",
    "creative", "organized", "detail oriented", "time management", "adaptable",
    "collaborative", "innovative", "strategic", "customer focused", "results driven",
    "gestione team", "comunicazione", "lavoro di squadra", "risoluzione problemi",
    "analitico", "creativo", "organizzato", "orientato ai dettagli", "flessibile",
    "innovativo", "strategico", "orientato al cliente", "orientato ai risultati",
)

POSITION_KEYWORDS = (
    "developer", "engineer", "architect", "manager", "director", "analyst",
    "consultant", "specialist", "coordinator", "supervisor", "lead", "senior",
    "junior", "intern", "amministratore", "sviluppatore", "ingegnere", "architetto",
    "responsabile", "direttore", "analista", "consulente", "specialista",
    "coordinatore", "supervisore", "capo", "stagista",
)

CERTIFICATION_KEYWORDS = (
    "aws", "azure", "google cloud", "pmp", "scrum master", "agile", "itil",
    "cisco", "microsoft", "oracle", "salesforce", "comptia", "cissp",
    "ceh", "cisa", "cism", "prince2", "six sigma", "iso 27001",
)


def _present(text: str, keywords: Sequence[str]) -> List[str]:
    return [kw for kw in keywords if kw in text]


def extract_metadata(cv_text: str) -> CandidateMetadata:
    lowered = cv_text.lower()

    technologies = _present(lowered, TECHNOLOGY_KEYWORDS)
    soft_skills = _present(lowered, SOFT_SKILL_KEYWORDS)
    positions = _present(lowered, POSITION_KEYWORDS)
    certifications = _present(lowered, CERTIFICATION_KEYWORDS)

    # Union in first-seen order.
    keywords = list(dict.fromkeys(technologies + soft_skills + positions + certifications))

    return CandidateMetadata(
        soft_skills=soft_skills,
        keywords=keywords,
        positions=positions,
        technologies=technologies,
        certifications=certifications,
    )
