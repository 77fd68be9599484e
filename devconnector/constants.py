"""
Application constants for DevConnector Profiles.

Contains the social network whitelist, GitHub lookup parameters and the
client-facing error messages.
"""

# =============================================================================
# Profile
# =============================================================================

# Keys accepted under profile.social
SOCIAL_NETWORKS = ("youtube", "facebook", "twitter", "instagram", "linkedin")

# Scalar attributes that can be merged into a profile
PROFILE_SCALAR_FIELDS = (
    "company",
    "website",
    "location",
    "bio",
    "status",
    "githubusername",
)

SKILLS_DELIMITER = ","

# =============================================================================
# GitHub
# =============================================================================

GITHUB_API_BASE = "https://api.github.com"
GITHUB_REPO_PAGE_SIZE = 5
GITHUB_REPO_SORT = "created"
GITHUB_REPO_DIRECTION = "asc"
GITHUB_USER_AGENT = "DevConnector/1.0"

# =============================================================================
# Auth
# =============================================================================

AUTH_HEADER = "x-auth-token"

# User ids are stored as signed 64-bit integers
MAX_USER_ID = 2**63 - 1

# =============================================================================
# Client-facing messages
# =============================================================================

MSG_NO_TOKEN = "no token, authorization denied"
MSG_INVALID_TOKEN = "token is invalid"
MSG_NO_PROFILE_FOR_USER = "There is no profile for this user"
MSG_PROFILE_NOT_FOUND = "Profile not found"
MSG_NO_GITHUB_PROFILE = "No github profile found"
MSG_ACCOUNT_DELETED = "Profile and user deleted"
MSG_SERVER_ERROR = "server error"

# Messages for required request fields, keyed by field name
REQUIRED_FIELD_MESSAGES = {
    "status": "Status is required",
    "skills": "Skills is required",
    "title": "Title is required",
    "company": "Company is required",
    "from": "From date is required",
    "school": "School is required",
    "degree": "Degree is required",
    "fieldofstudy": "Field of study is required",
}
