"""Constants for family tree data: vocabularies and display strings."""

# Relationship types
MARRIAGE = "marriage"
BIOLOGICAL_CHILD = "biological_child"
ADOPTED_CHILD = "adopted_child"
RELATIONSHIP_TYPES = (MARRIAGE, BIOLOGICAL_CHILD, ADOPTED_CHILD)

# Edge types that define the parent -> child tree (person_a is the parent)
CHILD_RELATIONSHIP_TYPES = frozenset({BIOLOGICAL_CHILD, ADOPTED_CHILD})

# Person genders
GENDERS = ("male", "female", "other")

# Profile roles
ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"

# Edit request lifecycle
STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
EDIT_REQUEST_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

# Snapshot tables (top-level keys of the data file)
TABLES = (
    "persons",
    "relationships",
    "profiles",
    "user_comments",
    "edit_requests",
    "user_root_node",
)

# Person fields hidden from visitors without an active profile
PRIVATE_PERSON_FIELDS = ("phone_number", "occupation", "current_residence")

# Comment reply attribution, e.g. "_replying to Jane Doe:_ thanks!"
REPLY_PREFIX_TEMPLATE = "_replying to {name}:_ "
REPLY_PREFIX_PATTERN = r"^_replying to (?P<name>.+?):_\s*"
DEFAULT_AUTHOR_NAME = "a member"

UNKNOWN_DATE = "Unknown"

# Hard cap for nested tree responses
MAX_TREE_DEPTH = 10
