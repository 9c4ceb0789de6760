"""Built-in library of sample statements for the seed dataset."""

from typing import Optional

from pydantic import BaseModel, Field


class LibraryQuery(BaseModel):
    """A named sample statement."""

    id: str = Field(..., description="Stable identifier")
    name: str = Field(..., description="Short display name")
    sql: str = Field(..., description="Statement text")
    description: str = Field(..., description="What the statement demonstrates")


class QueryCategory(BaseModel):
    """A group of related sample statements."""

    id: str = Field(..., description="Stable identifier")
    name: str = Field(..., description="Display name")
    queries: list[LibraryQuery] = Field(default_factory=list)


def _q(query_id: str, name: str, sql: str, description: str) -> LibraryQuery:
    return LibraryQuery(id=query_id, name=name, sql=sql, description=description)


DEFAULT_CATEGORIES = [
    QueryCategory(
        id="basic",
        name="Basic Queries",
        queries=[
            _q("select-all", "Select All", "SELECT * FROM users;",
               "Retrieve all columns from a table"),
            _q("select-columns", "Select Columns",
               "SELECT username, email FROM users;",
               "Retrieve specific columns"),
            _q("where", "Filter Rows (WHERE)",
               "SELECT * FROM products WHERE price > 50;",
               "Filter rows with a condition"),
            _q("order-by", "Sort Results",
               "SELECT * FROM products ORDER BY price DESC;",
               "Sort rows by a column"),
            _q("limit", "Limit Results", "SELECT * FROM users LIMIT 5;",
               "Return only the first rows"),
        ],
    ),
    QueryCategory(
        id="aggregation",
        name="Aggregation",
        queries=[
            _q("count", "Count Rows", "SELECT COUNT(*) FROM orders;",
               "Count the rows of a table"),
            _q("sum", "Sum Values", "SELECT SUM(total_amount) FROM orders;",
               "Add up a numeric column"),
            _q("avg", "Average Value", "SELECT AVG(price) FROM products;",
               "Average of a numeric column"),
            _q("group-by", "Group By",
               "SELECT category_id, COUNT(*) FROM products GROUP BY category_id;",
               "Aggregate per group"),
        ],
    ),
    QueryCategory(
        id="joins",
        name="Joins",
        queries=[
            _q("inner-join", "Inner Join",
               "SELECT orders.id, users.username, orders.total_amount\n"
               "FROM orders\n"
               "INNER JOIN users ON orders.user_id = users.id;",
               "Combine matching rows from two tables"),
            _q("left-join", "Left Join",
               "SELECT users.username, orders.id\n"
               "FROM users\n"
               "LEFT JOIN orders ON users.id = orders.user_id;",
               "Keep every row of the left table"),
        ],
    ),
    QueryCategory(
        id="dml",
        name="Data Manipulation",
        queries=[
            _q("insert", "Insert Row",
               "INSERT INTO users (username, email, full_name)\n"
               "VALUES ('new_user', 'new@example.com', 'New User');",
               "Add a new row"),
            _q("update", "Update Row",
               "UPDATE products SET price = price * 1.1 WHERE category_id = 1;",
               "Change existing rows"),
            _q("delete", "Delete Row",
               "DELETE FROM orders WHERE status = 'cancelled';",
               "Remove rows"),
        ],
    ),
]


class QueryLibrary:
    """Searchable collection of sample statements."""

    def __init__(self, categories: Optional[list[QueryCategory]] = None):
        self._categories = (
            categories if categories is not None else DEFAULT_CATEGORIES
        )

    def categories(self) -> list[QueryCategory]:
        return [category.model_copy(deep=True) for category in self._categories]

    def search(self, term: str) -> list[QueryCategory]:
        """
        Filter queries by name or description (case-insensitive).

        Categories left without matches are omitted. A blank term returns
        everything.
        """
        needle = term.strip().lower()
        if not needle:
            return self.categories()

        matched = []
        for category in self._categories:
            queries = [
                query
                for query in category.queries
                if needle in query.name.lower() or needle in query.description.lower()
            ]
            if queries:
                matched.append(
                    QueryCategory(id=category.id, name=category.name, queries=queries)
                )
        return matched

    def get(self, query_id: str) -> Optional[LibraryQuery]:
        """Get a query by id."""
        for category in self._categories:
            for query in category.queries:
                if query.id == query_id:
                    return query
        return None
