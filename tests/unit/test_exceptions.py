from dynamodb_repository.exceptions import (
    ConnectionError,
    DynamoDBRepositoryError,
    InvalidExpressionError,
    NotFoundError,
    SchemaValidationError,
)


class TestExceptionHierarchy:

    def test_all_errors_share_base(self):
        for error in (
            SchemaValidationError("bad"),
            NotFoundError("blog", {"pk": "p"}),
            InvalidExpressionError("bad"),
            ConnectionError("down"),
        ):
            assert isinstance(error, DynamoDBRepositoryError)

    def test_not_found_error_carries_table_and_key(self):
        error = NotFoundError("blog", {"pk": "post1", "sk": "post"})

        assert error.table_name == "blog"
        assert error.key == {"pk": "post1", "sk": "post"}
        assert str(error) == (
            "Item not found in table 'blog' with key: {'pk': 'post1', 'sk': 'post'} "
            "(Context: table_name=blog, key={'pk': 'post1', 'sk': 'post'})"
        )

    def test_schema_validation_error_carries_diagnostics(self):
        original = ValueError("boom")
        errors = [{'loc': ('likes',), 'msg': 'Input should be a valid integer', 'type': 'int_parsing'}]

        error = SchemaValidationError("Data does not match schema Post", errors=errors, original_error=original)

        assert error.errors == errors
        assert error.original_error is original
        assert error.context == {'validation_errors': errors}

    def test_invalid_expression_error_context(self):
        error = InvalidExpressionError("Unsupported expression", attribute="sk")

        assert error.attribute == "sk"
        assert isinstance(error, ValueError)
        assert str(error) == "Unsupported expression (Context: attribute=sk)"

    def test_repr(self):
        error = ConnectionError("down")

        assert repr(error) == "ConnectionError(message='down', original_error=None, context={})"
