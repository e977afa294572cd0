"""
Demo data: a coffee shop owner's month.

DEMO_TEXT is the kind of note a user pastes in; DEMO_RECORDS is what the
extractor returns for it (camelCase, exactly as the model answers). The
app shows this analysis before the first real request, and the tests use
it as a golden input.
"""

from cashflow_analyzer.models.records import ExtractionResult


DEMO_TEXT = """今天是2024年1月15日，天氣晴朗，咖啡店來了80位客人。
賣出咖啡120杯，每杯80元，總共9600元，全部現金收款。
賣出蛋糕15個，每個150元，總共2250元，信用卡收款。
提供咖啡教學服務2小時，每小時500元，總共1000元，已收款。

支出方面：
店租15000元，已付現金。
水電費2500元，已繳費。
咖啡豆進貨8000元，向供應商批購，現金付款。
牛奶和糖等原料3000元，超市採購。
外帶杯和餐具等包材1200元。
請工讀生薪資4000元，已發放。
廣告宣傳費800元，製作傳單。

個人生活方面：
薪水收入35000元，本月正職薪資，已入帳。
房租12000元，已轉帳給房東。
買菜費用4500元，一個月的食材。
交通費1800元，捷運和公車。
手機費899元，月租費已扣款。
看醫生500元，掛號費和藥費。
給父母孝親費8000元，已轉帳。
儲蓄5000元，存入定存帳戶。"""


def _expense(date, category, expense_category, type_, description, amount):
    return {
        "date": date,
        "category": category,
        "expenseCategory": expense_category,
        "type": type_,
        "description": description,
        "unitPrice": amount,
        "quantity": 1,
        "subtotal": amount,
    }


DEMO_RECORDS = {
    "incomes": [
        {
            "date": "2024-01-15",
            "weather": "晴朗",
            "customerCount": 80,
            "category": "生意收入",
            "type": "商品銷售收入",
            "description": "咖啡銷售",
            "unitPrice": 80,
            "quantity": 120,
            "paymentStatus": "已收款",
            "subtotal": 9600,
            "customerNote": "現金收款",
        },
        {
            "date": "2024-01-15",
            "weather": "晴朗",
            "customerCount": 15,
            "category": "生意收入",
            "type": "商品銷售收入",
            "description": "蛋糕銷售",
            "unitPrice": 150,
            "quantity": 15,
            "paymentStatus": "已收款",
            "subtotal": 2250,
            "customerNote": "信用卡收款",
        },
        {
            "date": "2024-01-15",
            "weather": "晴朗",
            "customerCount": 2,
            "category": "生意收入",
            "type": "服務提供收入",
            "description": "咖啡教學服務",
            "unitPrice": 500,
            "quantity": 2,
            "paymentStatus": "已收款",
            "subtotal": 1000,
            "customerNote": "教學課程",
        },
        {
            "date": "2024-01-01",
            "category": "生活收入",
            "type": "薪資收入",
            "description": "正職薪資",
            "unitPrice": 35000,
            "quantity": 1,
            "paymentStatus": "已收款",
            "subtotal": 35000,
            "customerNote": "月薪已入帳",
        },
    ],
    "expenses": [
        _expense("2024-01-01", "生意支出", "固定支出", "租金", "店租", 15000),
        _expense("2024-01-05", "生意支出", "固定支出", "水電", "水電費", 2500),
        _expense("2024-01-10", "生意支出", "變動支出", "原料", "咖啡豆進貨", 8000),
        _expense("2024-01-12", "生意支出", "變動支出", "原料", "牛奶和糖等原料", 3000),
        _expense("2024-01-13", "生意支出", "變動支出", "包材", "外帶杯和餐具", 1200),
        _expense("2024-01-15", "生意支出", "固定支出", "人事", "工讀生薪資", 4000),
        _expense("2024-01-08", "生意支出", "額外支出", "行銷廣告", "廣告宣傳費", 800),
        _expense("2024-01-01", "生活支出", "住", "房租", "房租", 12000),
        _expense("2024-01-03", "生活支出", "食", "買菜", "買菜費用", 4500),
        _expense("2024-01-05", "生活支出", "行", "交通", "交通費", 1800),
        _expense("2024-01-01", "生活支出", "電信", "手機", "手機費", 899),
        _expense("2024-01-07", "生活支出", "醫療", "看醫生", "掛號費和藥費", 500),
        _expense("2024-01-01", "生活支出", "孝養", "孝親費", "給父母生活費", 8000),
        _expense("2024-01-01", "生活支出", "儲蓄", "定存", "儲蓄", 5000),
    ],
}


def demo_extraction() -> ExtractionResult:
    """The demo records as a validated snapshot."""
    return ExtractionResult.model_validate(DEMO_RECORDS)
