"""Environment settings read once at import.

Import this before other project modules so values from a local .env file
(python-dotenv) are in place. In production set the variables directly.
"""

import os
import logging
from dotenv import load_dotenv

load_dotenv()

env_setting = os.environ.get('ENVIRONMENT', '').lower()
IS_PRODUCTION_ENVIRONMENT = env_setting == 'production'

if env_setting not in ['development', 'production']:
    logging.warning(
        f"ENVIRONMENT '{env_setting}' is not 'development' or 'production'; using development."
    )

PORT = int(os.environ.get('PORT', '3000'))

__all__ = ['IS_PRODUCTION_ENVIRONMENT', 'PORT']
