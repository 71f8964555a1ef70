# -*- coding: utf-8 -*-
from .accounts import AccountProvisioner, IdentityRegistration
from .backend import BackendMode, select_backend_mode
from .base import LifecycleManager
from .config_writer import ConfigWriter
from .controller import LifecycleController
from .database import DatabaseBootstrapper
from .descriptor import DeploymentSpec, ServiceDescriptor

__all__ = [
    "AccountProvisioner",
    "IdentityRegistration",
    "BackendMode",
    "select_backend_mode",
    "LifecycleManager",
    "ConfigWriter",
    "LifecycleController",
    "DatabaseBootstrapper",
    "DeploymentSpec",
    "ServiceDescriptor",
]
