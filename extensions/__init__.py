from __future__ import annotations

import pkgutil

EXTENSIONS = sorted(module.name for module in pkgutil.iter_modules(__path__, f"{__package__}."))
