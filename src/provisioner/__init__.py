"""skodaice provisioner.

Bootstrap the skodaice AWS account: rotate the infra-admin access keys, then
make sure the ECR repository and the ECS cluster exist.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
