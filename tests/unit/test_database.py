"""
Unit tests for the WordPress database source (in-memory SQLite).
"""

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from searcher import DependencyUnavailableError
from wordpress import SUPPORTED_TABLES, WordPressDatabase
from wordpress.database import escape_like

SCHEMA = [
    """
    CREATE TABLE wp_posts (
        ID INTEGER PRIMARY KEY,
        post_title TEXT,
        post_content TEXT,
        post_excerpt TEXT,
        post_date TEXT,
        post_status TEXT,
        post_type TEXT,
        post_name TEXT
    )
    """,
    "CREATE TABLE wp_terms (term_id INTEGER PRIMARY KEY, name TEXT, slug TEXT)",
]

POSTS = [
    (1, "မြန်မာနိုင်ငံ သတင်း", "မြန်မာ သတင်း", "", "2024-03-01 10:00:00", "publish", "post", "myanmar-news"),
    (2, "ရန်ကုန်မြို့ ခရီးသွား", "ရန်ကုန် ခရီးစဉ်", "", "2024-02-01 10:00:00", "publish", "post", ""),
    (3, "About", "About this site", "", "2024-01-01 10:00:00", "publish", "page", "about"),
    (4, "Draft", "မြန်မာ draft", "", "2024-04-01 10:00:00", "draft", "post", "draft"),
    (5, "image.png", "", "", "2024-05-01 10:00:00", "publish", "attachment", "image"),
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
        for row in POSTS:
            conn.execute(
                text("INSERT INTO wp_posts VALUES (:id, :title, :content, :excerpt, :date, :status, :type, :name)"),
                dict(zip(["id", "title", "content", "excerpt", "date", "status", "type", "name"], row)),
            )
        conn.execute(text("INSERT INTO wp_terms VALUES (1, 'သတင်း', 'news')"))
    return engine


@pytest.fixture
def database(engine):
    db = WordPressDatabase(url="sqlite://", table_prefix="wp_", engine=engine)
    db.connect()
    return db


class TestWordPressDatabase:
    def test_fetch_documents_published_newest_first(self, database):
        posts = database.fetch_documents(limit=10)
        assert [p.id for p in posts] == [1, 2, 3]
        assert posts[0].slug == "myanmar-news"
        assert posts[0].date.year == 2024

    def test_fetch_documents_limit(self, database):
        assert len(database.fetch_documents(limit=2)) == 2

    def test_search_posts(self, database):
        posts = database.search_posts("မြန်မာ")
        # 초안(4)은 제외
        assert [p.id for p in posts] == [1]

    def test_search_posts_wildcards_are_literal(self, database, engine):
        assert database.search_posts("%") == []
        assert database.search_posts("_") == []

        with engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO wp_posts VALUES "
                    "(6, '100% ခရီး', 'a_b!c', '', '2023-01-01 10:00:00', 'publish', 'post', 'sale')"
                )
            )
        assert [p.id for p in database.search_posts("100%")] == [6]
        assert [p.id for p in database.search_posts("a_b!")] == [6]
        assert database.search_posts("100%%") == []

    def test_escape_like(self):
        assert escape_like("50%_off!") == "50!%!_off!!"

    def test_get_post_by_id(self, database):
        post = database.get_post_by_id(3)
        assert post.type == "page"
        assert post.title == "About"

    def test_get_unpublished_post_is_none(self, database):
        assert database.get_post_by_id(4) is None
        assert database.get_post_by_id(999) is None

    def test_fetch_all_tables_only_existing(self, database):
        records = database.fetch_all_tables()
        assert set(records) == {"posts", "terms"}
        assert records["terms"][0]["name"] == "သတင်း"

    def test_fetch_table_records_rejects_unknown_table(self, database):
        with pytest.raises(ValueError):
            database.fetch_table_records("users")

    def test_supported_tables(self):
        assert "posts" in SUPPORTED_TABLES

    def test_check_table_exists(self, database, engine):
        assert database.check_table_exists()
        other = WordPressDatabase(url="sqlite://", table_prefix="dvp_", engine=engine)
        assert not other.check_table_exists()

    def test_invalid_prefix(self):
        with pytest.raises(ValueError):
            WordPressDatabase(url="sqlite://", table_prefix="wp_; DROP TABLE x")

    def test_missing_table_wrapped(self, engine):
        db = WordPressDatabase(url="sqlite://", table_prefix="missing_", engine=engine)
        with pytest.raises(DependencyUnavailableError) as exc_info:
            db.fetch_documents()
        assert exc_info.value.service == "database"

    def test_prefix_from_env(self, monkeypatch, engine):
        monkeypatch.setenv("TABLE_PREFIX", "dvp_")
        db = WordPressDatabase(url="sqlite://", engine=engine)
        assert db.posts_table == "dvp_posts"
