from catalog_diff.lifecycle.classifier import Lifecycle, LifecycleClassifier

__all__ = ["Lifecycle", "LifecycleClassifier"]
