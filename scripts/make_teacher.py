"""Create a Teacher account, or promote an existing account to Teacher.

Usage: python scripts/make_teacher.py <email> <password>
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import app
from weather_api.services import identity

if len(sys.argv) != 3:
    print(__doc__)
    sys.exit(1)

email, password = sys.argv[1], sys.argv[2]

with app.app_context():
    user = identity.get_by_email(email)

    if not user:
        user = identity.create_user(email, password, 'Teacher')
        print(f"New Teacher account created: {user.id}")
    else:
        identity.update_user(user.id, {'role': 'Teacher', 'password': password})
        print("Existing account promoted to Teacher")
