"""
Concrete Lab
Specimen lifecycle and scheduling engine for concrete sampling workflows.
"""

from concrete_lab.config import APP_NAME, VERSION

__version__ = VERSION
