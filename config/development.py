import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "goyalsons_db"),
}

DEBUG = True

# Workflow document the editor reads/writes, and the policy required to do so
WORKFLOW_ID = os.getenv("WORKFLOW_ID", "default")
ADMIN_POLICY = os.getenv("ADMIN_POLICY", "admin.panel")

# Base URL used by HttpWorkflowGateway (e.g. http://localhost:5000/api)
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the demo role catalog on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
