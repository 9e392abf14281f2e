from datetime import date, datetime
from bson import ObjectId

class DocumentSerializerVisitor:
    """Visitor to convert ObjectIds and datetimes in nested documents to strings."""
    def visit(self, obj):
        if isinstance(obj, dict):
            result = {}
            for key, value in obj.items():
                result[key] = self.visit(value)
            return result
        elif isinstance(obj, list):
            return [self.visit(item) for item in obj]
        elif isinstance(obj, ObjectId):
            return str(obj)
        elif isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return obj
