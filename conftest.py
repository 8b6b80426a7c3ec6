"""pytest root marker: puts the repository root on sys.path so `dispmap` imports without installing."""
