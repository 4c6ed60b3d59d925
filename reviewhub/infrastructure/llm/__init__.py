from .summary_service import LikeDislikePoint, LikesDislikes, SummaryService

__all__ = ["LikeDislikePoint", "LikesDislikes", "SummaryService"]
