"""Known cache locations for cachemanager."""

from pydantic import BaseModel, Field

from cachemanager.models import CacheCategory, CatalogEntry


class CategoryInfo(BaseModel):
    """Display metadata for a cache category."""

    category: CacheCategory
    key: str = Field(..., description="Menu letter that deletes the whole category")
    color: str = Field(..., description="Rich color used for this category")
    description: str = Field(..., description="One-line legend text")


CATEGORY_INFO: dict[CacheCategory, CategoryInfo] = {
    CacheCategory.USER: CategoryInfo(
        category=CacheCategory.USER,
        key="U",
        color="green",
        description="Application caches (browsers, npm, pip, yarn, etc.)",
    ),
    CacheCategory.DEV: CategoryInfo(
        category=CacheCategory.DEV,
        key="D",
        color="blue",
        description="Development tools (Xcode, Gradle, Docker, VS Code, etc.)",
    ),
    CacheCategory.SYSTEM: CategoryInfo(
        category=CacheCategory.SYSTEM,
        key="S",
        color="red",
        description="macOS system caches (requires admin privileges)",
    ),
    CacheCategory.TEMP: CategoryInfo(
        category=CacheCategory.TEMP,
        key="T",
        color="yellow",
        description="Temporary files and logs",
    ),
    CacheCategory.ANDROID: CategoryInfo(
        category=CacheCategory.ANDROID,
        key="N",
        color="magenta",
        description="Android Studio build folders",
    ),
}


def _entry(template: str, category: CacheCategory) -> CatalogEntry:
    return CatalogEntry(template=template, category=category)


# Order matters: it is the order entries are listed and numbered in the menu.
CATALOG: tuple[CatalogEntry, ...] = (
    # =========================================================================
    # USER - application caches
    # =========================================================================
    _entry("~/Library/Caches", CacheCategory.USER),
    _entry("~/Library/Containers", CacheCategory.USER),
    _entry("~/Library/Caches/Firefox", CacheCategory.USER),
    _entry("~/Library/Caches/Google/Chrome", CacheCategory.USER),
    _entry("~/Library/Caches/com.apple.Safari", CacheCategory.USER),
    _entry("~/Library/Caches/Homebrew", CacheCategory.USER),
    _entry("~/Library/Saved Application State", CacheCategory.USER),
    _entry("~/Library/Application Support/CrashReporter", CacheCategory.USER),
    _entry("~/.cache", CacheCategory.USER),
    _entry("~/.npm", CacheCategory.USER),
    _entry("~/.cache/yarn", CacheCategory.USER),
    _entry("~/.cache/pip", CacheCategory.USER),
    _entry("~/.gem", CacheCategory.USER),
    _entry("~/.composer/cache", CacheCategory.USER),
    _entry("~/.node-gyp", CacheCategory.USER),
    _entry("~/.thumbnails", CacheCategory.USER),
    # =========================================================================
    # DEV - development tools
    # =========================================================================
    _entry("~/Library/Developer/Xcode/DerivedData", CacheCategory.DEV),
    _entry("~/Library/Developer/Xcode/Archives", CacheCategory.DEV),
    _entry("~/Library/Developer/CoreSimulator", CacheCategory.DEV),
    _entry("~/Library/Developer/Xcode/iOS DeviceSupport", CacheCategory.DEV),
    _entry("~/Library/Application Support/Code/Cache", CacheCategory.DEV),
    _entry("~/Library/Application Support/Code/CachedData", CacheCategory.DEV),
    _entry("~/Library/Application Support/Code/CachedExtensions", CacheCategory.DEV),
    _entry("~/.gradle/caches", CacheCategory.DEV),
    _entry("~/.m2/repository", CacheCategory.DEV),
    _entry("~/Library/Caches/CocoaPods", CacheCategory.DEV),
    _entry("~/.cocoapods", CacheCategory.DEV),
    _entry("~/.android/build-cache", CacheCategory.DEV),
    _entry("~/Library/Android/sdk/.temp", CacheCategory.DEV),
    _entry("~/.cargo/registry", CacheCategory.DEV),
    _entry("~/.cargo/git", CacheCategory.DEV),
    _entry("~/Library/Containers/com.docker.docker/Data/vms", CacheCategory.DEV),
    _entry("~/Library/Group Containers", CacheCategory.DEV),
    # =========================================================================
    # SYSTEM - macOS system caches
    # =========================================================================
    _entry("/Library/Caches", CacheCategory.SYSTEM),
    _entry("/System/Library/Caches", CacheCategory.SYSTEM),
    _entry("/private/var/folders", CacheCategory.SYSTEM),
    _entry("/private/var/log", CacheCategory.SYSTEM),
    # =========================================================================
    # TEMP - temporary files and logs
    # =========================================================================
    _entry("/tmp", CacheCategory.TEMP),
    _entry("/private/var/tmp", CacheCategory.TEMP),
    _entry("/Library/Updates", CacheCategory.TEMP),
    _entry("/Users/Shared", CacheCategory.TEMP),
    _entry("~/Library/Logs", CacheCategory.TEMP),
    _entry("~/Downloads/*.dmg", CacheCategory.TEMP),
)

# Default Android Studio project roots; each existing one becomes an ANDROID entry
ANDROID_PROJECT_DIRS: tuple[str, ...] = (
    "~/AndroidStudioProjects",
    "~/StudioProjects",
)

# Name of the Gradle output directories measured and deleted inside project roots
BUILD_DIR_NAME = "build"


def get_catalog() -> list[CatalogEntry]:
    """Get static catalog rows followed by the Android project roots."""
    android = [_entry(root, CacheCategory.ANDROID) for root in ANDROID_PROJECT_DIRS]
    return list(CATALOG) + android


def get_category_info(category: CacheCategory) -> CategoryInfo:
    """Get display metadata for a category."""
    return CATEGORY_INFO[category]


def category_for_key(key: str) -> CacheCategory | None:
    """Find the category whose menu letter is *key* (case-insensitive)."""
    key = key.upper()
    for info in CATEGORY_INFO.values():
        if info.key == key:
            return info.category
    return None


def parse_category(name: str) -> CacheCategory | None:
    """Look up a category by name (case-insensitive)."""
    try:
        return CacheCategory(name.strip().upper())
    except ValueError:
        return None
