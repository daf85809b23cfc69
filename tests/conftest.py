"""Root test configuration: shared markdown samples"""

import pytest


RICH_MD = """\
# Title

Intro with **bold**, *em*, `code`, ~~gone~~ and ==marked== text and a [link](https://example.com).

- one
- two
  - nested
- [ ] todo
- [x] done

1. first
2. second

> quoted line

> [!NOTE]
> Remember this

```python
print("hi")
```

```mermaid
graph TD
A-->B
```

$$
E = mc^2
$$

| A | B |
|---|---|
| 1 | 2 |

![Alt text](img.png)

---

Footnote ref[^1].

[^1]: The note.
"""


@pytest.fixture(name="rich_md")
def rich_md_fixture():
    return RICH_MD
