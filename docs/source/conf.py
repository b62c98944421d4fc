from __future__ import annotations

import os
import sys
from datetime import datetime

# Add repo root so autodoc can find mrmath without installation.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

project = "MRmath"
author = "The MRmath Development Team"
copyright = f"{datetime.now().year}, {author}"

# Keep the build lightweight; mock numerical deps to avoid RTD build failures.
autodoc_mock_imports = [
    "numpy",
    "tqdm",
]

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx.ext.intersphinx",
]

templates_path = ["_templates"]
exclude_patterns = []

html_theme = "sphinx_rtd_theme"

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable", None),
}
