"""Export pipeline services for kintone-export."""
