class Collections:
    """Centralised Firestore collection path definitions"""

    # Per-project subcollections
    PROJECT_ANALYTICS = "projects/{project_id}/analytics"
    PROJECT_SEGMENTS = "projects/{project_id}/segments"
    PROJECT_PAGES = "projects/{project_id}/pages"

    # Per-page subcollections
    PAGE_SEGMENTS = "projects/{project_id}/pages/{page_id}/segments"

    @classmethod
    def project_path(cls, subcollection: str, project_id: str) -> str:
        """Generate the collection path for a per-project subcollection."""
        patterns = {
            "analytics": cls.PROJECT_ANALYTICS,
            "segments": cls.PROJECT_SEGMENTS,
            "pages": cls.PROJECT_PAGES,
        }
        pattern = patterns.get(subcollection)
        if not pattern:
            raise ValueError(f"Unknown subcollection: {subcollection}")
        return pattern.format(project_id=project_id)

    @classmethod
    def page_segments_path(cls, project_id: str, page_id: str) -> str:
        return cls.PAGE_SEGMENTS.format(project_id=project_id, page_id=page_id)
