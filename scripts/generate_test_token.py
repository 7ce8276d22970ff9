#!/usr/bin/env python3
"""Generate test JWT tokens for API testing."""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from course_catalog.core.auth import create_access_token

subject = sys.argv[1] if len(sys.argv) > 1 else "student-test"
name = sys.argv[2] if len(sys.argv) > 2 else "Test Student"

token = create_access_token(subject, name=name, email=f"{subject}@example.com")
print(f"Token for {subject}:\n{token}")
