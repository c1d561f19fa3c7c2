"""project-launcher: scaffold MERN, PERN, Next.js, Flask and Express projects."""

__version__ = "1.0.0"
