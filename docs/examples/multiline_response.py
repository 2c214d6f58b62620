module = {
    "id": "multiline-response",
    "title": "Module with a multiple line response",
    "frequency": "1m",
    "handler": lambda: ["Foo!", "Bar!", "Baz!"],
}
