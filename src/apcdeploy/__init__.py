"""apcdeploy - Deploy configuration data to AWS AppConfig.

apcdeploy resolves AppConfig resources by name, creates a hosted
configuration version, starts a deployment, and waits for the rollout.

Main features:
- Name-based resolution with ambiguity detection
- Guard against starting a second concurrent rollout
- Bounded, cancellable polling with rollback reason extraction
- Change detection against the live configuration version
- diff, pull and init against existing AppConfig resources
"""

from apcdeploy.config.loader import ConfigLoader
from apcdeploy.lib.errors import ApcDeployError, ConfigError, DeploymentError

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ApcDeployError",
    "ConfigError",
    "ConfigLoader",
    "DeploymentError",
]
