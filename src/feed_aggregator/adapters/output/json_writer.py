"""JSON artifact writer for the browser front end."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence

from feed_aggregator.core import ArtifactWriter, NormalizedItem, RunMetadata


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class JsonArtifactWriter(ArtifactWriter):
    """Write news.json and meta.json so that readers never see a partial file."""
    
    def __init__(
        self,
        output_dir: Path,
        items_filename: str = "news.json",
        meta_filename: str = "meta.json",
    ) -> None:
        self.output_dir = Path(output_dir)
        self.items_path = self.output_dir / items_filename
        self.meta_path = self.output_dir / meta_filename
    
    def _mkstemp(self, target: Path, suffix: str) -> tuple[int, Path]:
        fd, name = tempfile.mkstemp(dir=self.output_dir, prefix=f".{target.name}.", suffix=suffix)
        return fd, Path(name)
    
    def _stage_path(self, target: Path, suffix: str) -> Path:
        fd, path = self._mkstemp(target, suffix)
        os.close(fd)
        return path
    
    def write(
        self, items: Sequence[NormalizedItem], metadata: RunMetadata
    ) -> tuple[Path, Path]:
        """Serialize both documents, stage them as temp files, then move them into place.
        
        Returns:
            Tuple of (items path, metadata path)
        """
        documents = [
            (self.items_path, _dump([item.to_dict() for item in items])),
            (self.meta_path, _dump(metadata.to_dict())),
        ]
        
        self.output_dir.mkdir(parents=True, exist_ok=True)
        
        staged: list[tuple[Path, Path]] = []
        backup: Optional[Path] = None
        try:
            for target, content in documents:
                fd, tmp_path = self._mkstemp(target, ".tmp")
                staged.append((tmp_path, target))
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                    f.flush()
                    os.fsync(f.fileno())
            
            if self.items_path.exists():
                backup = self._stage_path(self.items_path, ".bak")
                shutil.copy2(self.items_path, backup)
            
            (items_tmp, _), (meta_tmp, _) = staged
            os.replace(items_tmp, self.items_path)
            try:
                os.replace(meta_tmp, self.meta_path)
            except OSError:
                # Put the previous items back so the pair stays consistent
                if backup is not None:
                    os.replace(backup, self.items_path)
                else:
                    self.items_path.unlink()
                raise
        finally:
            leftovers = [tmp_path for tmp_path, _ in staged]
            if backup is not None:
                leftovers.append(backup)
            for path in leftovers:
                if path.exists():
                    path.unlink()
        
        return self.items_path, self.meta_path
