"""Default constants for jobfeed-bot.

Scoring term sets, the tag taxonomy and the outreach templates are fixed;
only the keyword list, feeds and contact details come from the environment.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Tag Taxonomy
# Evaluated in declaration order. A label is emitted at most once, when any
# of its (lowercase) triggers is a substring of the lowercased text.
# ---------------------------------------------------------------------------
TAG_TAXONOMY: tuple[tuple[tuple[str, ...], str], ...] = (
    (("solidity", "smart contract"), "Solidity"),
    (("react",), "React"),
    (("next",), "Next.js"),
    (("frontend", "front-end"), "Frontend"),
    (("website", "landing page"), "Website Build"),
    (("blockchain", "web3", "crypto"), "Web3"),
    (("contract", "freelance"), "Contract"),
)

TAG_SEPARATOR: str = ", "

# ---------------------------------------------------------------------------
# Scoring Term Sets
# ---------------------------------------------------------------------------
WEB3_TERMS: tuple[str, ...] = (
    "web3",
    "blockchain",
    "ethereum",
    "solidity",
    "crypto",
    "defi",
    "base",
    "dapp",
    "smart contract",
    "zk",
    "layer2",
    "evm",
)

FRONTEND_TERMS: tuple[str, ...] = (
    "frontend",
    "front-end",
    "react",
    "next",
    "typescript",
    "tailwind",
    "ui engineer",
    "ui developer",
    "web developer",
    "website",
    "landing page",
)

WEBSITE_TERMS: tuple[str, ...] = ("website", "landing page")
ENGAGEMENT_TERMS: tuple[str, ...] = ("contract", "freelance", "short-term", "bounty")
SENIORITY_TERM: str = "senior"

KEYWORD_WEIGHT: float = 1.0
DOMAIN_MATCH_WEIGHT: float = 3.0
WEBSITE_WEIGHT: float = 2.0
ENGAGEMENT_WEIGHT: float = 2.0
SENIORITY_WEIGHT: float = 0.5

# ---------------------------------------------------------------------------
# Outreach Template
# Placeholders: {greeting_name}, {my_name}, {skills}, {role}, {reason},
#   {portfolio_line}
# ---------------------------------------------------------------------------
OUTREACH_TEMPLATE: str = """\
Hi {greeting_name},

I'm {my_name} - a frontend developer experienced with {skills}. I came across *{role}* and I'm excited about the opportunity{reason}
{portfolio_line}
I'd love to chat for 10-15 minutes to discuss how I can help. I'm available this week for a short call and can start on a contract or full-time.

Thanks,
{my_name}"""

PORTFOLIO_LINE: str = "\nYou can see my work here: {portfolio_url}\n"

FALLBACK_COMPANY: str = "Hiring team"
FALLBACK_ROLE: str = "the role"
FALLBACK_REQUESTER: str = "Applicant"
EXCERPT_MAX_CHARS: int = 240

OUTREACH_SUBJECT: str = "{my_name} - Interest in {role}"

# ---------------------------------------------------------------------------
# LLM Outreach Prompt
# Placeholders: {my_name}, {skills}, {portfolio_url}, {job_title},
#   {company}, {job_description}
# ---------------------------------------------------------------------------
OUTREACH_LLM_PROMPT: str = """\
You are writing a short cold outreach message to a founder or hiring team on
behalf of a freelance frontend developer.

## Applicant
- Name: {my_name}
- Skills: {skills}
- Portfolio: {portfolio_url}

## Target Posting
- Title: {job_title}
- Company: {company}
- Description: {job_description}

## Rules
1. Write in FIRST PERSON as the applicant.
2. Keep it under 180 words, 3-4 short paragraphs.
3. Mention the portfolio URL once if one is given.
4. End with "Thanks," and the applicant's name on its own line.
5. Plain text only, no markdown formatting.
"""

# ---------------------------------------------------------------------------
# Notification Message
# ---------------------------------------------------------------------------
NOTIFICATION_EXCERPT_CHARS: int = 300
