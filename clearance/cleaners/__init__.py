"""
Cache cleaners for Clearance.

One cleaner per cache kind, all behind the CacheCleaner interface:
- npm / yarn: direct directory removal with a package-manager CLI fallback
- docker: daemon-side prunes through the docker CLI
- winsxs / wintemp / winchunks: Windows temp and error-report locations
"""

from typing import Dict, Mapping, Optional

from clearance.cleaners.base import DISPLAY_NAMES, CacheCleaner, CacheKind, CleanOutcome
from clearance.cleaners.docker import DockerCleaner
from clearance.cleaners.package import PackageCacheCleaner, npm_cleaner, yarn_cleaner
from clearance.cleaners.windows import WindowsCleaner
from clearance.config import ClearanceConfig
from clearance.process import CommandRunner


def build_cleaners(
    config: Optional[ClearanceConfig] = None,
    runner: Optional[CommandRunner] = None,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Dict[CacheKind, CacheCleaner]:
    """Create every known cleaner, keyed and ordered by cache kind."""
    config = config or ClearanceConfig()
    runner = runner or CommandRunner(timeout=config.command_timeout)
    paths = config.cache_paths(env=env, platform=platform)
    powershell = config.command("powershell")

    return {
        CacheKind.NPM: npm_cleaner(paths.npm, runner, config.command("npm")),
        CacheKind.YARN: yarn_cleaner(paths.yarn, runner, config.command("yarn")),
        CacheKind.DOCKER: DockerCleaner(runner, config.command("docker")),
        CacheKind.WINSXS: WindowsCleaner(CacheKind.WINSXS, paths.winsxs, runner, platform, powershell),
        CacheKind.WINTEMP: WindowsCleaner(CacheKind.WINTEMP, paths.wintemp, runner, platform, powershell),
        CacheKind.WINCHUNKS: WindowsCleaner(
            CacheKind.WINCHUNKS, paths.winchunks, runner, platform, powershell
        ),
    }


__all__ = [
    "CacheCleaner",
    "CacheKind",
    "CleanOutcome",
    "DISPLAY_NAMES",
    "DockerCleaner",
    "PackageCacheCleaner",
    "WindowsCleaner",
    "build_cleaners",
    "npm_cleaner",
    "yarn_cleaner",
]
