#!/usr/bin/env python
"""从 GitHub 内容仓库加载一次完整快照并输出摘要（不启动服务）。

用于在部署前确认内容仓库可以被完整加载。

用法:
    uv run python scripts/check_snapshot.py [--slug spring-boot] [--branch main]
"""

import argparse
import asyncio
import sys
from pathlib import Path


def _ensure_project_root_on_path() -> None:
    """确保项目根目录在 Python 路径中，便于直接运行脚本。"""
    project_root = Path(__file__).parent.parent
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_path()


async def check_snapshot(slug: str | None = None, branch: str | None = None) -> int:
    """加载快照并打印每个项目的数据量。

    Returns:
        进程退出码（0 表示加载成功）
    """
    from loguru import logger

    from src.modules.projects.application.snapshot_loader import SnapshotLoader
    from src.modules.projects.domain.exceptions import SnapshotLoadError
    from src.modules.projects.domain.releases import find_current_release
    from src.modules.projects.infrastructure.github_source import GithubProjectSource

    source = GithubProjectSource(branch=branch)
    try:
        snapshot = await SnapshotLoader(source).load()
    except SnapshotLoadError as exc:
        logger.error(f"Snapshot load failed: {exc}")
        return 1
    finally:
        await source.aclose()

    slugs = [slug] if slug else list(snapshot.projects)
    for project_slug in slugs:
        if project_slug not in snapshot:
            logger.warning(f"Project not found: {project_slug}")
            return 1
        releases = [d.to_content() for d in snapshot.documentation[project_slug]]
        current = find_current_release(releases)
        logger.info(
            f"{project_slug}: {len(releases)} releases "
            f"(current: {current['version'] if current else '-'}), "
            f"{len(snapshot.support[project_slug])} generations, "
            f"policy {snapshot.support_policy[project_slug]}"
        )

    logger.info(f"Loaded {len(snapshot)} projects at {snapshot.loaded_at.isoformat()}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="检查项目快照能否完整加载")
    parser.add_argument(
        "--slug",
        type=str,
        default=None,
        help="只输出指定项目（默认输出全部项目）",
    )
    parser.add_argument(
        "--branch",
        type=str,
        default=None,
        help="内容仓库分支（默认使用 GITHUB_CONTENT_BRANCH）",
    )

    args = parser.parse_args()
    sys.exit(asyncio.run(check_snapshot(args.slug, args.branch)))


if __name__ == "__main__":
    main()
