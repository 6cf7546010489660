"""
Placement Prep Tracker
A personal placement-preparation tracker with AI-assisted practice.

Architecture:
- PostgreSQL: Tracker data (goals, problems, resumes, applications, roadmap, sessions)
- MongoDB: Documents (resume files in GridFS, AI resume analyses)
- AI gateway: Mock test questions, mock interviews, resume reviews
"""

__version__ = "1.0.0"
