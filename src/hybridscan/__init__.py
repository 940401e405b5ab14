"""HybridScan — signature matching fused with semantic review for source code security."""

__version__ = "0.1.0"
