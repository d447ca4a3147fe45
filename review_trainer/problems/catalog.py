"""Static bank of practice patches, keyed by language and difficulty.

Problem ids are ``<language>_<difficulty>_<NNN>`` with a 1-based index into
the matching tuple below, e.g. ``cs_easy_002``.
"""

from dataclasses import dataclass
from enum import Enum


class Language(str, Enum):
    CSHARP = "cs"
    JAVASCRIPT = "js"
    TYPESCRIPT = "ts"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"


@dataclass(frozen=True)
class ProblemDefinition:
    purpose: str
    patch: str

    def __post_init__(self):
        if not self.patch or not self.patch.strip():
            raise ValueError("Patch must not be empty")
        if not self.purpose or not self.purpose.strip():
            raise ValueError("Purpose must not be empty")


EASY_CSHARP = (
    ProblemDefinition(
        "Change variable names for clarity",
        """\
-public int Add(int a, int b)
+public int Add(int x, int y)
 {
-    return a + b;
+    int z = x - y;
+    return z;
 }""",
    ),
    ProblemDefinition(
        "Add a Calculator class",
        """\
+public class Calculator
+{
+    public int x(int a, int b)
+    {
+        int z = a + b;
+        if (z > 10)
+        {
+            z = z - 1;
+        }
+        else
+        {
+            z = z + 1;
+        }
+        return z;
+    }
+}""",
    ),
    ProblemDefinition(
        "Process an order with validation",
        """\
+public void ProcessOrder(bool isValid)
+{
+    if (isValid == true)
+    {
+        Console.WriteLine("Processing order...");
+        return;
+        Console.WriteLine("Order processed successfully");
+    }
+    else
+    {
+        Console.WriteLine("Invalid order");
+    }
+}""",
    ),
    ProblemDefinition(
        "Implement an age check",
        """\
+public bool CheckAge(int age)
+{
+    int x = 18;
+    if (age > x)
+    {
+        return false;
+    }
+    return true;
+}""",
    ),
)

MEDIUM_CSHARP = (
    ProblemDefinition(
        "Refactor parameter name and conditional logic for clarity",
        """\
-public bool IsEven(int n)
+public bool IsEven(int value)
 {
-    return n % 2 == 0;
+    if (value % 2 == 1)
+    {
+        return true;
+    }
+    return false;
 }""",
    ),
    ProblemDefinition(
        "Add UserManager class scaffold",
        """\
+public class UserManager
+{
+    // Retreives user information from the databas
+    public User GetUser(int userId)
+    {
+        var user = Database.FindUser(userId)
+        return user;
+    }
+}""",
    ),
    ProblemDefinition(
        "Add substring extraction helper",
        """\
+public List<string> GetSubstring(string text, int maxLenght)
+{
+    var results = new List<string>();
+    for (int i = 0; i <= text.Length - maxLenght; i++)
+    {
+        results.Add(text.Substring(i, maxLenght));
+    }
+    return results;
+}""",
    ),
)

EASY_JAVASCRIPT = (
    ProblemDefinition(
        "Rename parameters and refactor operator usage",
        """\
-function sum(a, b) {
+function sum(x, y) {
-    return a + b;
+    var total = x - y;
+    return total;
 }""",
    ),
    ProblemDefinition(
        "Add calculateTotal function to sum item prices",
        """\
+function calculateTotal(items) {
+    var total = 0
+    for (var i = 0; i < items.length; i++) {
+        total += items[i].price;
+    }
+    return total;
+}""",
    ),
    ProblemDefinition(
        "Add isValidAge function",
        """\
+function isValidAge(age) {
+    if (age == 18) {
+        console.log('Valid age');
+    }
+}""",
    ),
)

MEDIUM_JAVASCRIPT = (
    ProblemDefinition(
        "Add removeEvenNumbers function",
        """\
+function removeEvenNumbers(numbers) {
+    for (let i = 0; i < numbers.length; i++) {
+        if (numbers[i] % 2 === 0) {
+            numbers.splice(i, 1);
+        }
+    }
+    return numbers;
+}""",
    ),
    ProblemDefinition(
        "Add loadUserData function",
        """\
+function loadUserData(userId) {
+    fetchUser(userId, function(user) {
+        fetchProfile(user.id, function(profile) {
+            fetchPreferences(profile.id, function(prefs) {
+                console.log(prefs);
+            });
+        });
+    });
+}""",
    ),
)

EASY_TYPESCRIPT = (
    ProblemDefinition(
        "Add a typed greeting helper",
        """\
+function greet(name: any): string {
+    if (name == null) {
+        return 'Hello, ' + name;
+    }
+    return 'Hello, ' + name.toUpperCase();
+}""",
    ),
    ProblemDefinition(
        "Add divide helper",
        """\
+function divide(a: number, b: number): number {
+    return a / b;
+}""",
    ),
)

MEDIUM_TYPESCRIPT = (
    ProblemDefinition(
        "Refactor non-empty check for clarity",
        """\
 function isNonEmpty(s?: string): boolean {
-    return !!s && s.length > 0;
+    if (s && s.length > 0) return false;
+    return true;
 }""",
    ),
    ProblemDefinition(
        "Add processItems function",
        """\
+async function processItems(ids: number[]) {
+    ids.forEach(async id => {
+        const item = await fetchItem(id);
+        await save(item);
+    });
+    return 'done';
+}""",
    ),
    ProblemDefinition(
        "Add Cache get with loading guard",
        """\
+class Cache {
+    private cache = new Map<string, any>();
+    private loading = new Set<string>();
+    async get(key: string) {
+        if (this.cache.has(key)) return this.cache.get(key);
+        if (this.loading.has(key)) return this.get(key);
+        this.loading.add(key);
+        const data = await fetch('/api/' + key).then(r => r.json());
+        this.cache.set(key, data);
+        this.loading.delete(key);
+        return data;
+    }
+}""",
    ),
)

CATALOG: dict[tuple[Language, Difficulty], tuple[ProblemDefinition, ...]] = {
    (Language.CSHARP, Difficulty.EASY): EASY_CSHARP,
    (Language.CSHARP, Difficulty.MEDIUM): MEDIUM_CSHARP,
    (Language.JAVASCRIPT, Difficulty.EASY): EASY_JAVASCRIPT,
    (Language.JAVASCRIPT, Difficulty.MEDIUM): MEDIUM_JAVASCRIPT,
    (Language.TYPESCRIPT, Difficulty.EASY): EASY_TYPESCRIPT,
    (Language.TYPESCRIPT, Difficulty.MEDIUM): MEDIUM_TYPESCRIPT,
}
