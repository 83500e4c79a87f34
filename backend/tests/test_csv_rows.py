from core.csv_rows import parse_csv, write_csv


def test_parse_strips_bom_and_blank_lines():
    parsed = parse_csv("\ufeffname,sku\r\nTea,T-1\n\n  \nCoffee\n")
    assert parsed.headers == ["name", "sku"]
    assert parsed.rows == [
        {"name": "Tea", "sku": "T-1"},
        {"name": "Coffee", "sku": None},
    ]


def test_parse_trims_cells():
    parsed = parse_csv(" name , sku \n  Tea ,  T-1  ")
    assert parsed.headers == ["name", "sku"]
    assert parsed.rows[0] == {"name": "Tea", "sku": "T-1"}


def test_parse_quoted_fields():
    parsed = parse_csv('name,description\n"Beans, 1kg","said ""hi"""\n')
    assert parsed.rows[0] == {"name": "Beans, 1kg", "description": 'said "hi"'}


def test_parse_ignores_extra_values():
    parsed = parse_csv("name\nTea,extra")
    assert parsed.rows == [{"name": "Tea"}]


def test_parse_empty_text():
    parsed = parse_csv("")
    assert parsed.headers == []
    assert parsed.rows == []
    assert parse_csv(None).rows == []


def test_write_csv_quotes_and_formats():
    text = write_csv(["a", "b"], [["x,y", None], [True, 3], ['say "hi"', False]])
    assert text == 'a,b\r\n"x,y",\r\nTRUE,3\r\n"say ""hi""",FALSE'


def test_write_csv_headers_only():
    assert write_csv(["sku", "name"], []) == "sku,name"


def test_written_csv_reads_back():
    text = write_csv(["name", "description"], [["Beans, 1kg", "dark roast"]])
    assert parse_csv(text).rows == [{"name": "Beans, 1kg", "description": "dark roast"}]


def test_parse_stray_carriage_return_in_field():
    parsed = parse_csv("name,description\nTea,a\rb\n")
    assert parsed.headers == ["name", "description"]
    assert parsed.rows == [{"name": "Tea", "description": "a\rb"}]
