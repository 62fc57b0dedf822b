# Domain Entities
# Pure business objects with no external dependencies
from .catalog import (
    NEWS_CATEGORIES,
    TOOL_CATEGORIES,
    Course,
    CourseModule,
    DisplayPage,
    Lesson,
    NewsArticle,
    NewsCategory,
    Slide,
    Tool,
    ToolCategory,
    TutorialSection,
    display_price,
)
from .user import Plan, UserProfile, UserRole

__all__ = [
    "Tool",
    "ToolCategory",
    "NewsArticle",
    "NewsCategory",
    "DisplayPage",
    "Slide",
    "TutorialSection",
    "Course",
    "CourseModule",
    "Lesson",
    "TOOL_CATEGORIES",
    "NEWS_CATEGORIES",
    "display_price",
    "UserProfile",
    "UserRole",
    "Plan",
]
