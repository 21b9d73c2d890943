"""
Services container module for git-meta.

Builds the config, git client and MetaStore for a checkout so the CLI
(and tests) wire everything the same way.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gitmeta.core.config import (
    GitMetaConfig,
    load_config,
    resolve_config_path,
    resolve_store_path,
)
from gitmeta.infrastructure.git_client import (
    GitClient,
    GitClientInterface,
    find_repository_root,
)

from .meta_store import MetaStore, create_meta_store

logger = logging.getLogger(__name__)


@dataclass
class ServicesContainer:
    """
    Container holding the service instances for one invocation.

    Attributes:
        root_path: Repository root
        config_path: Resolved config file location
        store_path: Resolved snapshot file location
        config: Loaded configuration
        git_client: Client listing tracked/staged files
        meta_store: Store orchestrating store/apply/status
    """

    root_path: Path
    config_path: Path
    store_path: Path
    config: GitMetaConfig
    git_client: GitClientInterface
    meta_store: MetaStore


def create_services(
    cwd: Optional[Path | str] = None,
    config_path: Optional[Path | str] = None,
    store_path: Optional[Path | str] = None,
    git_client: Optional[GitClientInterface] = None,
    root_path: Optional[Path | str] = None,
) -> ServicesContainer:
    """
    Create all services for a checkout.

    Args:
        cwd: Directory inside the checkout (defaults to the process cwd)
        config_path: Config file override
        store_path: Snapshot file override
        git_client: Client override; a subprocess GitClient otherwise
        root_path: Repository root override; resolved through git otherwise

    Returns:
        ServicesContainer

    Raises:
        GitCommandError: If the repository root cannot be determined
        ConfigError: If the config file holds values of the wrong type
    """
    root = Path(root_path) if root_path is not None else find_repository_root(cwd)
    resolved_config = resolve_config_path(root, config_path)
    resolved_store = resolve_store_path(root, store_path)

    config = load_config(resolved_config)
    client = git_client if git_client is not None else GitClient(root)

    logger.debug(f"Repository root: {root}; config: {resolved_config}; store: {resolved_store}")

    meta_store = create_meta_store(root, client, resolved_config, resolved_store, config=config)

    return ServicesContainer(
        root_path=root,
        config_path=resolved_config,
        store_path=resolved_store,
        config=config,
        git_client=client,
        meta_store=meta_store,
    )
