# ABOUTME: Shared pytest setup for the report tests
# ABOUTME: Makes src and the fake source importable from every test module

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))
sys.path.insert(0, str(Path(__file__).parent))
