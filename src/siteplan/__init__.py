"""
Siteplan - Visual Site Planning Backend
=======================================

Version: 0.1.0
"""

__version__ = "0.1.0"

from siteplan.core.tree import FlatNode, SiteItemType, SiteNode, SiteTree, build_tree, flatten_tree

__all__ = [
    "__version__",
    # Tree model
    "SiteItemType",
    "SiteNode",
    "FlatNode",
    "SiteTree",
    "build_tree",
    "flatten_tree",
]
