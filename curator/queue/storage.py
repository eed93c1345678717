"""File-backed artifact storage: one front-matter file per slug."""

from pathlib import Path
from typing import List

import frontmatter

from ..models import ContentArtifact, is_valid_slug

ARTIFACT_SUFFIX = ".mdx"
ARCHIVE_DIRNAME = "rejected"


class ArtifactStore:
    """Read and write artifacts in a single channel directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    @property
    def archive_dir(self) -> Path:
        return self.directory / ARCHIVE_DIRNAME

    def path_for(self, slug: str) -> Path:
        """
        File path for a slug.

        Raises:
            ValueError: slug is not lowercase ascii words joined by hyphens
        """
        if not is_valid_slug(slug):
            raise ValueError(f"Invalid slug: {slug!r}")
        return self.directory / f"{slug}{ARTIFACT_SUFFIX}"

    def exists(self, slug: str) -> bool:
        return self.path_for(slug).is_file()

    def list_slugs(self) -> List[str]:
        """
        Slugs of all tracked artifacts, sorted.

        Archived files and files whose names are not valid slugs are not tracked.
        """
        if not self.directory.exists():
            return []
        return sorted(
            p.stem
            for p in self.directory.glob(f"*{ARTIFACT_SUFFIX}")
            if p.is_file() and is_valid_slug(p.stem)
        )

    def read_text(self, slug: str) -> str:
        return self.path_for(slug).read_text(encoding="utf-8")

    def write_text(self, slug: str, text: str) -> Path:
        """Write raw text for a slug, replacing any existing file."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(slug)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)
        return path

    def read(self, slug: str) -> ContentArtifact:
        """
        Read an artifact.

        Raises:
            FileNotFoundError: unknown slug
            yaml.YAMLError: malformed front-matter
            ValueError: front-matter value that cannot be converted
        """
        return ContentArtifact.from_text(slug, self.read_text(slug))

    def write(self, artifact: ContentArtifact) -> Path:
        """Write an artifact; an existing file with the same slug is overwritten."""
        return self.write_text(artifact.slug, artifact.to_text())

    def load_post(self, slug: str) -> frontmatter.Post:
        """Front-matter post for a slug, keeping keys this package does not model."""
        return frontmatter.loads(self.read_text(slug))

    def save_post(self, slug: str, post: frontmatter.Post) -> Path:
        return self.write_text(slug, frontmatter.dumps(post, sort_keys=False) + "\n")

    def archive(self, slug: str) -> Path:
        """
        Move an artifact into the archive directory.

        Raises:
            FileNotFoundError: unknown slug
        """
        source = self.path_for(slug)
        if not source.is_file():
            raise FileNotFoundError(f"Artifact not found: {slug}")

        self.archive_dir.mkdir(parents=True, exist_ok=True)
        target = self.archive_dir / source.name
        source.replace(target)
        return target
