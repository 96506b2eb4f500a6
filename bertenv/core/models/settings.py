"""
Installer settings — pinned versions, URLs and paths.

Defaults reproduce the stock BERT project setup. Any field can be
overridden from ``installer.yml``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class InstallerSettings(BaseModel):
    """Tunable constants of an install run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Environment
    python_version: str = "3.9"            # conda env interpreter
    base_python: str | None = None         # venv base interpreter (None = python3 / python)
    venv_dir: str = "venv"

    # Framework
    torch_version: str = "1.9.0"
    torchvision_version: str = "0.10.0"
    find_links: str = "https://download.pytorch.org/whl/torch_stable.html"
    index_base: str = "https://download.pytorch.org/whl"

    # Dependencies
    requirements: str = "requirements.txt"

    # Guidance
    conda_download_url: str = "https://www.anaconda.com/products/miniconda"
    model_url: str = "https://huggingface.co/bert-base-chinese"
    pretrained_dir: str = "./pretrained_bert"
    data_dir: str = "./data"
    train_command: str = (
        "python main.py --mode train --data_dir ./data "
        "--pretrained_bert_dir ./pretrained_bert"
    )
