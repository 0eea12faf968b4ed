# installer_core/__init__.py
from .system_utils import SystemUtility
from .host_profile import HostProfile, detect_host_profile
from .install_mapping import POLICIES, dispatch, get_policy
